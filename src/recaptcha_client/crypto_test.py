import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from recaptcha_client import crypto
from recaptcha_client.errors import ConfigurationError, InvalidKeyError, PaddingError


KEY_HEX = "000102030405060708090a0b0c0d0e0f"


class TestPad:
    """Test suite for PKCS#7 padding"""

    def test_short_input(self):
        """Test padding a partial block"""
        assert crypto.pad(b"YELLOW SUBMARINE", 20) == b"YELLOW SUBMARINE\x04\x04\x04\x04"

    def test_aligned_input_gets_full_block(self):
        """Test that aligned input gets a whole extra block of padding"""
        padded = crypto.pad(b"A" * 16)
        assert len(padded) == 32
        assert padded[16:] == b"\x10" * 16

    def test_empty_input(self):
        """Test padding an empty byte string"""
        assert crypto.pad(b"") == b"\x10" * 16

    @pytest.mark.parametrize("length", [0, 1, 7, 15, 16, 17, 31, 32, 100])
    @pytest.mark.parametrize("block_size", [8, 16, 20])
    def test_alignment_and_inverse(self, length, block_size):
        """Test padded length is block aligned and unpad restores the input"""
        data = bytes(i % 256 for i in range(length))
        padded = crypto.pad(data, block_size)
        assert len(padded) % block_size == 0
        assert 1 <= len(padded) - len(data) <= block_size
        assert crypto.unpad(padded, block_size) == data

    def test_invalid_block_size(self):
        """Test that an out of range block size is rejected"""
        with pytest.raises(ValueError, match="Invalid block size"):
            crypto.pad(b"abc", 0)


class TestUnpad:
    """Test suite for PKCS#7 unpadding"""

    def test_valid(self):
        assert crypto.unpad(b"abc" + b"\x0d" * 13) == b"abc"

    def test_inconsistent_padding_bytes(self):
        """Test that padding bytes must all equal the pad count"""
        with pytest.raises(PaddingError, match="Invalid padding bytes"):
            crypto.unpad(b"abcdefghijklm\x01\x02\x03")

    def test_zero_pad_count(self):
        with pytest.raises(PaddingError):
            crypto.unpad(b"abcdefghijklmno\x00")

    def test_pad_count_larger_than_block(self):
        with pytest.raises(PaddingError):
            crypto.unpad(b"abcdefghijklmno\x11")

    def test_unaligned_input(self):
        with pytest.raises(PaddingError):
            crypto.unpad(b"abc\x01")

    def test_empty_input(self):
        with pytest.raises(PaddingError):
            crypto.unpad(b"")


class TestDeriveKey:
    """Test suite for hex key derivation"""

    def test_lowercase_hex(self):
        assert crypto.derive_key(KEY_HEX) == bytes(range(16))

    def test_uppercase_hex(self):
        assert crypto.derive_key(KEY_HEX.upper()) == bytes(range(16))

    def test_not_hex(self):
        """Test that non-hex characters are rejected"""
        with pytest.raises(InvalidKeyError, match="not a valid hex string"):
            crypto.derive_key("zz" * 16)

    def test_odd_length(self):
        with pytest.raises(InvalidKeyError):
            crypto.derive_key(KEY_HEX[:-1])

    def test_wrong_key_length(self):
        """Test that a 256-bit key is not accepted"""
        with pytest.raises(InvalidKeyError, match="length 16"):
            crypto.derive_key(KEY_HEX * 2)

    def test_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            crypto.derive_key("")


class TestEncrypt:
    """Test suite for AES-128-CBC with a zero IV"""

    def test_fips197_vector(self):
        """With a zero IV the first CBC block equals the plain AES block (FIPS-197 C.1)"""
        key = crypto.derive_key(KEY_HEX)
        plaintext = bytes.fromhex("00112233445566778899aabbccddeeff")
        assert crypto.encrypt(plaintext, key).hex() == "69c4e0d86a7b0430d8cdb78070b4c55a"

    def test_sp800_38a_vector(self):
        """First block of the SP 800-38A AES-128 vectors"""
        key = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
        plaintext = bytes.fromhex("6bc1bee22e409f96e93d7e117393172a")
        assert crypto.encrypt(plaintext, key).hex() == "3ad77bb40d7a3660a89ecaf32466ef97"

    def test_blocks_are_chained(self):
        """Test that each block is XORed with the previous ciphertext block"""
        key = crypto.derive_key(KEY_HEX)
        plaintext = b"B" * 32
        ciphertext = crypto.encrypt(plaintext, key)
        c1, c2 = ciphertext[:16], ciphertext[16:]
        assert c1 != c2

        ecb = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
        expected_c2 = ecb.update(bytes(a ^ b for a, b in zip(plaintext[16:], c1))) + ecb.finalize()
        assert c2 == expected_c2

    def test_deterministic(self):
        key = crypto.derive_key(KEY_HEX)
        plaintext = crypto.pad(b"johnsmith@example.com")
        assert crypto.encrypt(plaintext, key) == crypto.encrypt(plaintext, key)

    def test_no_expansion_beyond_padding(self):
        key = crypto.derive_key(KEY_HEX)
        plaintext = crypto.pad(b"x" * 40)
        assert len(crypto.encrypt(plaintext, key)) == len(plaintext) == 48

    def test_requires_padded_input(self):
        """Test that the encryptor refuses unpadded plaintext"""
        key = crypto.derive_key(KEY_HEX)
        with pytest.raises(PaddingError, match="not a multiple of 16"):
            crypto.encrypt(b"johnsmith@example.com", key)

    def test_wrong_key_length(self):
        with pytest.raises(InvalidKeyError):
            crypto.encrypt(b"\x00" * 16, b"\x00" * 32)

    def test_decrypt_round_trip(self):
        key = crypto.derive_key(KEY_HEX)
        padded = crypto.pad("jöhn@example.com".encode("utf-8"))
        assert crypto.decrypt(crypto.encrypt(padded, key), key) == padded
