from typing import Optional


def evaluate(student_code: str, solution: str) -> bool:
    """Exact, byte-for-byte comparison of a student's code with the solution."""
    return student_code == solution


def evaluate_published(student_code: str, solution: Optional[str]) -> bool:
    """
    Like evaluate(), but nothing matches a solution that was never published.

    An empty buffer therefore does not count as a match in a room whose
    mentor has not saved anything yet.
    """
    if solution is None:
        return False
    return evaluate(student_code, solution)
