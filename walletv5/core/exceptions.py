class WalletV5Error(Exception):
    pass


class ConfigurationError(WalletV5Error):
    pass


class InvalidPublicKey(WalletV5Error):
    def __init__(self,
                 length: int):
        self.length = length

    def __str__(self):
        return f"WalletV5: public key must be 32 bytes, got {self.length}"


class FieldOverflow(WalletV5Error):
    def __init__(self,
                 field: str,
                 value,
                 bits: int):
        self.field = field
        self.value = value
        self.bits = bits

    def __str__(self):
        return f"WalletV5: {self.field}={self.value} is out of range for {self.bits} bits"


class TransfersOutOfRange(WalletV5Error):
    def __init__(self,
                 **kwargs):
        self.kwargs = kwargs

    def __str__(self):
        kvs = ', '.join(f'{k}: {v}' for k, v in self.kwargs.items())
        return f"WalletV5: can make only 1 to 255 transfers per operation: {kvs}"


class ActionsNotProvided(WalletV5Error):
    def __str__(self):
        return "WalletV5: actions are not provided"


class InvalidActionType(WalletV5Error):
    def __init__(self, action):
        self.action = action

    def __str__(self):
        if isinstance(self.action, int):
            return f"Invalid action type: unknown tag {self.action:#x}"
        return f"Invalid action type: {type(self.action).__name__}"
