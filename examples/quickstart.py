"""
Quickstart example for the Minesweeper Hint Solver.

This script demonstrates basic usage of the solver.
"""

from minehint import (
    Board,
    HintSolver,
    describe_recommendation,
    format_recommendation,
    run_solver_many_tests,
)


def main():
    print("=" * 60)
    print("Minesweeper Hint Solver - Quickstart Example")
    print("=" * 60)

    # Example 1: Certain moves
    print("\n1. A board with certain moves...")
    print("-" * 60)

    board = Board.from_text(
        """
        1 1 1 . .
        . . 1 . .
        . . 1 1 1
        """
    )
    solver = HintSolver()
    rec = solver.solve(board)
    print(format_recommendation(board, rec))
    print(describe_recommendation(rec))

    # Example 2: No certain move, exact probabilities
    print("\n2. A board that needs a guess...")
    print("-" * 60)

    board = Board.from_text(
        """
        1 . .
        . . .
        . . .
        """
    )
    rec = solver.solve(board)
    print(format_recommendation(board, rec))
    print(describe_recommendation(rec))
    for (r, c), p in rec.guess_cells:
        print(f"  ({r}, {c}): {p:.3f}")

    # Example 3: Random boards for statistics
    print("\n3. Solving 50 random 7x10 boards...")
    print("-" * 60)

    results = run_solver_many_tests(7, 10, mines_count=12, reveal_count=20, runs=50, seed=0)

    print(f"Certain moves: {results['certain_rate']*100:.1f}%")
    print(f"Guesses:       {results['guess_rate']*100:.1f}%")
    print(f"Mean best-guess probability: {results['avg_min_probability']:.3f}")
    print(f"Guess failure rate: {results['guess_failure_rate']*100:.1f}%")
    print(f"Unsound deductions: {results['unsound_deductions']:.0f}")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
