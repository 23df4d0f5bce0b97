from walletv5.messages.actions import (
    ExtensionAdd,
    ExtensionRemove,
    SetSignatureAuth,
    WalletActions,
    WalletTransfer,
)
from walletv5.messages.out_list import ActionSendMsg
from walletv5.messages.wallet_id import (
    MAINNET_GLOBAL_ID,
    TESTNET_GLOBAL_ID,
    ClientContext,
    CustomContext,
    WalletId,
    WalletV5Version,
    serialize_wallet_id,
)
from walletv5.wallet import (
    SIGNED_EXTERNAL_PREFIX,
    SIGNED_INTERNAL_PREFIX,
    WalletV5,
    WalletV5Options,
)
