import pytest
from pytoniq_core import HashMap, StateInit

from walletv5 import WalletV5, WalletV5Options
from walletv5.core.exceptions import ConfigurationError, FieldOverflow, InvalidPublicKey
from walletv5.core.settings import Settings
from walletv5.core.sources import WALLET_V5R1_CODE_HASH
from walletv5.messages.externals import WalletV5R1Data
from walletv5.messages.wallet_id import CustomContext, WalletId, parse_wallet_id, serialize_wallet_id


def value(byte: int) -> bytes:
    return bytes([byte]) * 32


class TestWalletData:

    def test_layout(self, wallet, public_key):
        data = wallet.build_data()
        s = data.begin_parse()
        assert s.load_bit() == 1
        assert s.load_uint(32) == 0
        assert s.load_int(32) == serialize_wallet_id(WalletId(), 0)
        assert s.load_bytes(32) == public_key
        assert s.load_bit() == 0  # empty extensions
        assert s.remaining_bits == 0
        assert len(data.refs) == 0

    def test_parse(self, public_key, code, clock):
        options = WalletV5Options(
            public_key=public_key,
            signature_allowed=False,
            seqno=17,
            workchain=-1,
            wallet_id=WalletId(-3, CustomContext(99)),
        )
        wallet = WalletV5(options, code=code, clock=clock)
        data = WalletV5R1Data(wallet.build_data().begin_parse())
        assert not data.signature_allowed
        assert data.seqno == 17
        assert data.public_key == public_key
        assert data.extensions is None
        assert parse_wallet_id(data.wallet_id, -3).context == CustomContext(99)

    def test_deterministic(self, public_key, code, clock):
        options = WalletV5Options(public_key=public_key, extensions={5: value(1), 1: value(2)})
        first = WalletV5(options, code=code, clock=clock).build_data()
        second = WalletV5(options, code=code, clock=clock).build_data()
        assert first.hash == second.hash

    def test_extensions_dict(self, public_key, code, clock):
        options = WalletV5Options(public_key=public_key, extensions={(1 << 256) - 1: value(0xFF)})
        data = WalletV5(options, code=code, clock=clock).build_data()
        s = data.begin_parse()
        s.load_bits(1 + 32 + 32 + 256)
        assert s.load_bit() == 1
        assert len(data.refs) == 1

    def test_extensions_dict_contents(self, public_key, code, clock):
        extensions = {
            0: value(0),
            1: value(1),
            0x42 << 200: value(0x42),
            (1 << 256) - 1: value(0xFF),
        }
        options = WalletV5Options(public_key=public_key, extensions=extensions)
        data = WalletV5(options, code=code, clock=clock).build_data()

        parsed = HashMap.parse(data.refs[0].begin_parse(), 256, value_deserializer=lambda s: s.load_bytes(32))
        assert parsed == extensions

    def test_extensions_parsed_from_data(self, public_key, code, clock):
        options = WalletV5Options(public_key=public_key, extensions={7: value(7)})
        data = WalletV5R1Data(WalletV5(options, code=code, clock=clock).build_data().begin_parse())
        parsed = HashMap.parse(data.extensions.begin_parse(), 256, value_deserializer=lambda s: s.remaining_bits)
        assert parsed == {7: 256}

    @pytest.mark.parametrize("raw", [b"", b"\x01", bytes(31), bytes(33)])
    def test_extension_value_width(self, public_key, code, clock, raw):
        options = WalletV5Options(public_key=public_key, extensions={1: value(1), 2: raw})
        with pytest.raises(FieldOverflow):
            WalletV5(options, code=code, clock=clock)

    def test_extensions_insertion_order(self, public_key, code, clock):
        first = WalletV5Options(public_key=public_key, extensions={1: value(1), 2: value(2), 3: value(3)})
        second = WalletV5Options(public_key=public_key, extensions={3: value(3), 1: value(1), 2: value(2)})
        assert WalletV5(first, code=code, clock=clock).build_data().hash == \
            WalletV5(second, code=code, clock=clock).build_data().hash

    def test_extension_key_overflow(self, public_key, code, clock):
        options = WalletV5Options(public_key=public_key, extensions={1 << 256: value(1)})
        with pytest.raises(FieldOverflow):
            WalletV5(options, code=code, clock=clock)

    @pytest.mark.parametrize("length", [0, 31, 33, 64])
    def test_public_key_length(self, code, clock, length):
        with pytest.raises(InvalidPublicKey):
            WalletV5(WalletV5Options(public_key=b'\x00' * length), code=code, clock=clock)

    def test_seqno_overflow(self, public_key, code, clock):
        with pytest.raises(FieldOverflow):
            WalletV5(WalletV5Options(public_key=public_key, seqno=1 << 32), code=code, clock=clock)

    def test_workchain_overflow(self, public_key, code, clock):
        options = WalletV5Options(public_key=public_key, workchain=200, wallet_id=WalletId(context=CustomContext(1)))
        with pytest.raises(FieldOverflow):
            WalletV5(options, code=code, clock=clock)


class TestStateInit:

    def test_address(self, wallet, code):
        state_init = StateInit(code=code, data=wallet.build_data())
        assert wallet.address.wc == 0
        assert wallet.address.hash_part == state_init.serialize().hash
        assert wallet.state_init.serialize().hash == state_init.serialize().hash

    def test_masterchain_address(self, public_key, code, clock):
        wallet = WalletV5(WalletV5Options(public_key=public_key, workchain=-1), code=code, clock=clock)
        assert wallet.address.wc == -1

    def test_address_depends_on_subwallet(self, public_key, code, clock):
        from walletv5.messages.wallet_id import ClientContext
        other = WalletV5Options(public_key=public_key, wallet_id=WalletId(context=ClientContext(subwallet_id=1)))
        first = WalletV5(WalletV5Options(public_key=public_key), code=code, clock=clock)
        second = WalletV5(other, code=code, clock=clock)
        assert first.address.hash_part != second.address.hash_part

    def test_default_code(self, clock):
        wallet = WalletV5(WalletV5Options(public_key=bytes(32)), clock=clock)
        assert wallet.code.hash.hex() == WALLET_V5R1_CODE_HASH

    def test_default_code_address(self, clock):
        # mainnet, client context, subwallet 0, zero public key, no extensions
        wallet = WalletV5(WalletV5Options(public_key=bytes(32)), clock=clock)
        assert wallet.build_data().hash.hex() == \
            '0f80a4e3e2630cba3f6f37d12dbcf6afaaa015cd889eeb681a334a4fbe84cf31'
        assert wallet.address.wc == 0
        assert wallet.address.hash_part.hex() == \
            'e0e92fabe2b74d53e3eebe0486bf54887f212d3f79b884593347b834b776b20a'


class TestSettings:

    def test_defaults(self):
        settings = Settings()
        assert settings.network_global_id == -239
        assert settings.workchain == 0
        assert settings.timeout == 60

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv('TON_WALLET_V5_NETWORK_GLOBAL_ID', '-3')
        monkeypatch.setenv('TON_WALLET_V5_TIMEOUT', '120')
        settings = Settings()
        assert settings.network_global_id == -3
        assert settings.timeout == 120

    def test_options_from_settings(self, public_key):
        settings = Settings(network_global_id=-3, workchain=-1, subwallet_id=7)
        options = WalletV5Options.from_settings(public_key, settings, seqno=4)
        assert options.workchain == -1
        assert options.seqno == 4
        assert options.wallet_id.network_global_id == -3
        assert options.wallet_id.context.subwallet_id == 7

    def test_code_from_settings(self, public_key, code, clock):
        settings = Settings(code_boc=code.to_boc().hex())
        wallet = WalletV5(WalletV5Options(public_key=public_key), clock=clock, settings=settings)
        assert wallet.code.hash == code.hash

    def test_missing_code(self, public_key):
        with pytest.raises(ConfigurationError):
            WalletV5(WalletV5Options(public_key=public_key), settings=Settings(code_boc=''))

    def test_wallet_from_settings(self, public_key, code, clock):
        settings = Settings(network_global_id=-3, workchain=-1, subwallet_id=7, timeout=30)
        wallet = WalletV5.from_settings(public_key, settings, code=code, clock=clock)
        assert wallet.settings is settings
        assert wallet.options.workchain == -1
        assert wallet.wallet_id == serialize_wallet_id(wallet.options.wallet_id, -1)
        assert wallet.address.wc == -1

        s = wallet.pack_message(False).begin_parse()
        s.load_uint(32)
        s.load_int(32)
        assert s.load_uint(32) == clock() + 30
