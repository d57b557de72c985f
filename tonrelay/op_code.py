"""Op code comparison for message bodies."""


def compare_op_code(expected_op_code: int, op_code: bytes) -> bool:
    """True when ``op_code`` is exactly four big-endian bytes equal to the expected value."""
    data = bytes(op_code)
    return len(data) == 4 and int.from_bytes(data, "big") == expected_op_code