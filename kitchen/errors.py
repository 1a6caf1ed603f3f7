class KitchenError(Exception):
    """Base class for errors raised while building recipe instructions."""


class ValidationError(KitchenError, ValueError):
    """Recipe data is malformed or incomplete."""


class EncodingError(KitchenError, ValueError):
    """A value does not fit the width it is being encoded into."""


class DerivationExhaustion(KitchenError):
    """No bump in 255..0 produced an off-curve program address."""
