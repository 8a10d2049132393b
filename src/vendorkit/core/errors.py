class VendorkitError(Exception):
    pass


class InstallError(VendorkitError):
    pass


class EntropyOverrideError(VendorkitError):
    pass
