"""
Modern primitives delegated to audited libraries: AES block modes and RC4
from `cryptography`, digests and HMAC from hashlib/hmac.

Key and IV text is read either as UTF-8 bytes or as hex (key_format /
iv_format), and lengths are validated before any primitive is invoked.
Ciphertext is rendered as hex or Base64 (output_format); decode reads the
same rendering back.
"""

import base64
import binascii
import hashlib
import hmac

from cryptography.hazmat.decrepit.ciphers.algorithms import ARC4
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..framework import Param, SymmetricModule, TransformModule, register_module

AES_KEY_SIZES = (16, 24, 32)
AES_BLOCK_SIZE = 16
RC4_KEY_SIZES = tuple(sorted(bits // 8 for bits in ARC4.key_sizes))
HASH_ALGORITHMS = ("md5", "sha1", "sha224", "sha256", "sha384", "sha512", "sha3_256", "sha3_512", "blake2b")
BYTE_FORMATS = ("utf-8", "hex")
OUTPUT_FORMATS = ("hex", "base64")


class _KeyedModule(TransformModule):
    """Shared key/IV parsing and ciphertext rendering."""

    def read_bytes(self, param: str, fmt: str) -> bytes:
        value = self.config[param]
        if fmt == "hex":
            try:
                return bytes.fromhex(value)
            except ValueError:
                raise self.config_error(f"'{param}' is not valid hex") from None
        try:
            return value.encode("utf-8")
        except UnicodeEncodeError:
            raise self.config_error(f"'{param}' is not encodable as UTF-8") from None

    def render(self, data: bytes) -> str:
        if self.config["output_format"] == "base64":
            return base64.b64encode(data).decode("ascii")
        return data.hex()

    def parse(self, text: str) -> bytes:
        payload = "".join(text.split())
        try:
            if self.config["output_format"] == "base64":
                return base64.b64decode(payload, validate=True)
            return bytes.fromhex(payload)
        except (ValueError, binascii.Error):
            raise self.decode_error(f"Input is not valid {self.config['output_format']}") from None

    def utf8(self, data: bytes) -> str:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            raise self.decode_error("Decrypted bytes are not valid UTF-8 (wrong key?)") from None


@register_module
class BlockCipherModule(_KeyedModule):
    """
    AES in CBC, ECB or CTR mode. CBC and ECB use PKCS7 padding; CTR is a
    stream mode and uses the IV as its 16-byte initial counter block.
    """

    kind = "block_cipher"
    name = "Block Cipher (AES)"
    description = "AES-128/192/256 in CBC, ECB or CTR mode with PKCS7 padding."
    PARAMS = (
        Param("mode", str, "cbc", choices=("cbc", "ecb", "ctr")),
        Param("key", str, "0123456789abcdef", help="16, 24 or 32 bytes"),
        Param("key_format", str, "utf-8", choices=BYTE_FORMATS),
        Param("iv", str, "fedcba9876543210", help="16 bytes; unused in ECB"),
        Param("iv_format", str, "utf-8", choices=BYTE_FORMATS),
        Param("output_format", str, "hex", choices=OUTPUT_FORMATS),
    )

    def cipher(self) -> Cipher:
        key = self.read_bytes("key", self.config["key_format"])
        if len(key) not in AES_KEY_SIZES:
            raise self.config_error(f"AES key must be 16, 24 or 32 bytes, got {len(key)}")
        mode = self.config["mode"]
        if mode == "ecb":
            return Cipher(algorithms.AES(key), modes.ECB())
        iv = self.read_bytes("iv", self.config["iv_format"])
        if len(iv) != AES_BLOCK_SIZE:
            raise self.config_error(f"IV must be {AES_BLOCK_SIZE} bytes, got {len(iv)}")
        if mode == "ctr":
            return Cipher(algorithms.AES(key), modes.CTR(iv))
        return Cipher(algorithms.AES(key), modes.CBC(iv))

    @property
    def padded(self) -> bool:
        return self.config["mode"] != "ctr"

    def validate(self):
        self.cipher()

    def encode(self, text: str) -> str:
        data = self.utf8_bytes(text)
        if self.padded:
            padder = padding.PKCS7(AES_BLOCK_SIZE * 8).padder()
            data = padder.update(data) + padder.finalize()
        encryptor = self.cipher().encryptor()
        return self.render(encryptor.update(data) + encryptor.finalize())

    def decode(self, text: str) -> str:
        data = self.parse(text)
        if self.padded and (not data or len(data) % AES_BLOCK_SIZE):
            raise self.decode_error(f"Ciphertext length {len(data)} is not a positive multiple of {AES_BLOCK_SIZE}")
        decryptor = self.cipher().decryptor()
        data = decryptor.update(data) + decryptor.finalize()
        if self.padded:
            unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
            try:
                data = unpadder.update(data) + unpadder.finalize()
            except ValueError:
                raise self.decode_error("Invalid PKCS7 padding (wrong key or IV?)") from None
        return self.utf8(data)


@register_module
class RC4Module(_KeyedModule):
    kind = "rc4"
    name = "RC4"
    description = "RC4 stream cipher."
    PARAMS = (
        Param("key", str, "secret-key", help=f"One of {', '.join(map(str, RC4_KEY_SIZES))} bytes"),
        Param("key_format", str, "utf-8", choices=BYTE_FORMATS),
        Param("output_format", str, "hex", choices=OUTPUT_FORMATS),
    )

    def cipher(self) -> Cipher:
        key = self.read_bytes("key", self.config["key_format"])
        if len(key) not in RC4_KEY_SIZES:
            raise self.config_error(
                f"RC4 key must be one of {', '.join(map(str, RC4_KEY_SIZES))} bytes, got {len(key)}")
        return Cipher(ARC4(key), mode=None)

    def validate(self):
        self.cipher()

    def encode(self, text: str) -> str:
        encryptor = self.cipher().encryptor()
        return self.render(encryptor.update(self.utf8_bytes(text)) + encryptor.finalize())

    def decode(self, text: str) -> str:
        decryptor = self.cipher().decryptor()
        return self.utf8(decryptor.update(self.parse(text)) + decryptor.finalize())


@register_module
class HashFunctionModule(SymmetricModule):
    kind = "hash"
    name = "Hash Function"
    description = "One-way digest of the UTF-8 input, as hex."
    PARAMS = (
        Param("algorithm", str, "sha256", choices=HASH_ALGORITHMS),
    )

    def transform(self, text: str) -> str:
        return hashlib.new(self.config["algorithm"], self.utf8_bytes(text)).hexdigest()


@register_module
class HMACModule(SymmetricModule):
    kind = "hmac"
    name = "HMAC"
    description = "Keyed message authentication code, as hex."
    PARAMS = (
        Param("key", str, "secret"),
        Param("key_format", str, "utf-8", choices=BYTE_FORMATS),
        Param("algorithm", str, "sha256", choices=HASH_ALGORITHMS),
    )

    def key(self) -> bytes:
        if self.config["key_format"] == "hex":
            try:
                return bytes.fromhex(self.config["key"])
            except ValueError:
                raise self.config_error("'key' is not valid hex") from None
        try:
            return self.config["key"].encode("utf-8")
        except UnicodeEncodeError:
            raise self.config_error("'key' is not encodable as UTF-8") from None

    def validate(self):
        self.key()

    def transform(self, text: str) -> str:
        return hmac.new(self.key(), self.utf8_bytes(text), self.config["algorithm"]).hexdigest()
