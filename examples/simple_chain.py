"""
Example: Simple chain factor graph.

A--B--C with pairwise factors, eliminated into a Bayes tree.
"""

import numpy as np

from cliquetree.solver import compute_marginals, eliminate_multifrontal, sections_from_tables


def main():
    # Unary on A
    phi_A = np.array([0.6, 0.4])

    # Pairwise on (A, B)
    phi_AB = np.array([
        [0.9, 0.1],
        [0.2, 0.8]
    ])

    # Pairwise on (B, C)
    phi_BC = np.array([
        [0.3, 0.7],
        [0.5, 0.5]
    ])

    factors = {
        "f_A": (("A",), phi_A),
        "f_AB": (("A", "B"), phi_AB),
        "f_BC": (("B", "C"), phi_BC),
    }

    print("Eliminating chain A--B--C in order C, B, A...")
    result = eliminate_multifrontal(sections_from_tables(factors), ["C", "B", "A"])

    print("\nJunction tree cliques:")
    for node in result.junction_tree.nodes():
        print(f"  {node.keys} (problem size {node.problem_size})")

    print("\nBayes tree conditionals (children first):")
    for conditional in result.bayes_tree.conditionals():
        print(f"  P({', '.join(conditional.frontals)} | {', '.join(conditional.parents) or '-'})")

    marginals = compute_marginals(factors, ordering=["C", "B", "A"])

    print("\nMarginal distributions:")
    for var, marg in marginals.items():
        print(f"  P({var}) = {marg}")

    # Verify by brute force
    print("\n--- Verification by brute force ---")
    p_c = np.zeros(2)
    for a in range(2):
        for b in range(2):
            for c in range(2):
                p_c[c] += phi_A[a] * phi_AB[a, b] * phi_BC[b, c]
    p_c /= p_c.sum()

    print(f"P(C) (brute force) = {p_c}")
    print(f"P(C) (Bayes tree)  = {marginals['C']}")
    print(f"Match: {np.allclose(p_c, marginals['C'])}")


if __name__ == "__main__":
    main()
