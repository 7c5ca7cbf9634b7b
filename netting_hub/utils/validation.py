from netting_hub.utils.exceptions import BadRequestException


U64_MAX = 2**64 - 1


def validate_amount(amount: int, *, field: str = "amount") -> int:
    """Validate an unsigned 64-bit obligation amount.

    bool is rejected explicitly because it is an int subclass.
    """

    if isinstance(amount, bool) or not isinstance(amount, int):
        raise BadRequestException(f"Invalid {field}", details={field: repr(amount)})
    if amount < 0:
        raise BadRequestException(f"{field} must be non-negative", details={field: amount})
    if amount > U64_MAX:
        raise BadRequestException(f"{field} exceeds unsigned 64-bit range", details={field: str(amount)})
    return amount


def validate_max_cycle_length(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise BadRequestException("max_cycle_length must be a positive integer", details={"max_cycle_length": value})
    return value
