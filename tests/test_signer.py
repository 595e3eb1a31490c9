import base64
import hashlib
import re

import pytest
from nacl.signing import VerifyKey

from inference_relay import crypto_utils
from inference_relay.errors import SignerError
from inference_relay.signer import Signer

MNEMONIC = "abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon about"


def test_bip39_seed_matches_reference_vector():
    seed = crypto_utils.seed_from_mnemonic(MNEMONIC)
    assert seed.hex() == (
        "5eb00bbddcf069084889a8ab9155568165f5c453ccb85e70811aaed6f6da5fc1"
        "9a5ac40b389cd370d086206dec8aa6c43daea6690f20ad3d8d48b2d2ce9e38e4"
    )


def test_slip10_ed25519_reference_vector():
    seed = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
    master = crypto_utils.derive_ed25519_key(seed, "m")
    child = crypto_utils.derive_ed25519_key(seed, "m/0'")
    assert master.hex() == "2b4be7f19ee27bbf30c667b642d5f4aa69fd169872f8fc3059c08ebae2eb19e7"
    assert child.hex() == "68e0fe46dfb67e368c75379acec591dad19df3cde26e63b93a8e704f1dade7a3"


def test_parse_sui_path():
    indices = crypto_utils.parse_derivation_path(crypto_utils.SUI_DERIVATION_PATH)
    assert indices == [0x80000000 + i for i in (44, 784, 0, 0, 0)]


@pytest.mark.parametrize("path", ["", "44'/784'", "m/44'/784/0'", "m/x'"])
def test_parse_rejects_bad_paths(path):
    with pytest.raises(ValueError):
        crypto_utils.parse_derivation_path(path)


def test_signer_is_deterministic():
    first = Signer.from_mnemonic(MNEMONIC)
    second = Signer.from_mnemonic("  " + MNEMONIC.replace(" ", "   ") + "\n")
    assert first.address == second.address
    assert re.fullmatch(r"0x[0-9a-f]{64}", first.address)


def test_address_is_blake2b_of_flagged_public_key():
    signer = Signer.from_mnemonic(MNEMONIC)
    expected = hashlib.blake2b(b"\x00" + signer.public_key, digest_size=32).hexdigest()
    assert signer.address == "0x" + expected


def test_different_paths_give_different_accounts():
    default = Signer.from_mnemonic(MNEMONIC)
    other = Signer.from_mnemonic(MNEMONIC, path="m/44'/784'/1'/0'/0'")
    assert default.address != other.address


def test_sign_transaction_produces_verifiable_signature():
    signer = Signer.from_mnemonic(MNEMONIC)
    tx_bytes = b"\x00\x00\x02move-call-payload"

    serialized = base64.b64decode(signer.sign_transaction(base64.b64encode(tx_bytes).decode()))

    assert len(serialized) == 1 + 64 + 32
    assert serialized[0] == 0x00
    assert serialized[65:] == signer.public_key
    digest = hashlib.blake2b(b"\x00\x00\x00" + tx_bytes, digest_size=32).digest()
    VerifyKey(signer.public_key).verify(digest, serialized[1:65])


def test_sign_transaction_rejects_bad_base64():
    signer = Signer.from_mnemonic(MNEMONIC)
    with pytest.raises(SignerError):
        signer.sign_transaction("not base64!!")


def test_repr_hides_private_key():
    signer = Signer.from_mnemonic(MNEMONIC)
    assert "private_key" not in repr(signer)
    assert signer.address in repr(signer)


@pytest.mark.parametrize(
    "mnemonic",
    [
        "",
        "   ",
        "abandon " * 11 + "abandon",
        "definitely not a valid bip thirty nine phrase at all ok",
    ],
)
def test_invalid_mnemonic_raises_signer_error(mnemonic):
    with pytest.raises(SignerError):
        Signer.from_mnemonic(mnemonic)


def test_signature_serialization_checks_length():
    with pytest.raises(ValueError):
        crypto_utils.serialize_signature(b"\x01" * 10, b"\x02" * 32)
