from typing import Sequence


def calculate_chi_square(
    observed_values: Sequence[float], expected_values: Sequence[float]
) -> float:
    """
    Calculate the chi-square statistic given observed and expected counts.

    :param observed_values: Observed counts, e.g. how often a card landed on each position
    :param expected_values: Expected counts under the null hypothesis
    :return: The calculated chi-square statistic
    :raises ValueError: If the two sequences do not have the same length,
        or an expected count is not positive
    """
    if len(observed_values) != len(expected_values):
        raise ValueError("Observed and expected value lists must have the same length.")
    if any(e <= 0 for e in expected_values):
        raise ValueError("Expected values must be positive.")

    return sum((o - e) ** 2 / e for o, e in zip(observed_values, expected_values))
