"""
Reed-Solomon error correction for byte payloads.

Protected payloads carry a two-byte header: a magic byte (0xEC) and the
number of parity symbols, followed by the RS-encoded data.
"""

from typing import Tuple

from reedsolo import ReedSolomonError, RSCodec

from .log import log_info, log_warn

# ECC Magic byte marking an error-corrected payload
ECC_MAGIC_BYTE = 0xEC
DEFAULT_ECC_SYMBOLS = 10
MAX_ECC_SYMBOLS = 254


class ECCError(ValueError):
    """Raised when a protected payload is malformed or beyond repair."""
    pass


class ErrorCorrection:
    """
    Reed-Solomon error correction wrapper.
    Adds ECC bytes to data for corruption recovery.
    """

    @staticmethod
    def check_symbols(ecc_symbols: int):
        if not 0 <= ecc_symbols <= MAX_ECC_SYMBOLS:
            raise ECCError(f"ECC symbols must be between 0 and {MAX_ECC_SYMBOLS}, got {ecc_symbols}")

    @staticmethod
    def encode(data: bytes, ecc_symbols: int) -> bytes:
        """
        Add Reed-Solomon ECC to data.
        Returns: [MAGIC_BYTE] + [ECC_SYMBOLS_COUNT] + [RS_ENCODED_DATA]
        """
        ErrorCorrection.check_symbols(ecc_symbols)
        if ecc_symbols == 0:
            return data

        rsc = RSCodec(ecc_symbols)
        encoded = rsc.encode(data)
        return bytes([ECC_MAGIC_BYTE, ecc_symbols]) + bytes(encoded)

    @staticmethod
    def decode(data: bytes, ecc_symbols: int) -> Tuple[bytes, int]:
        """
        Verify the header, then decode and repair the payload.

        Returns:
            (decoded_data, errors_corrected)

        Raises:
            ECCError: missing/mismatched header or uncorrectable data
        """
        ErrorCorrection.check_symbols(ecc_symbols)
        if ecc_symbols == 0:
            return data, 0

        if len(data) < 2 or data[0] != ECC_MAGIC_BYTE:
            raise ECCError("Payload has no error-correction header")
        if data[1] != ecc_symbols:
            raise ECCError(f"Payload was protected with {data[1]} ECC symbols, expected {ecc_symbols}")

        try:
            rsc = RSCodec(ecc_symbols)
            decoded, _, errata_pos = rsc.decode(data[2:])
        except ReedSolomonError as e:
            log_warn(f"ECC decode failed: {e}. Data may be corrupted beyond repair.")
            raise ECCError(f"Uncorrectable payload: {e}") from e

        errors_corrected = len(errata_pos) if errata_pos else 0
        if errors_corrected:
            log_info(f"Corrected {errors_corrected} error(s) using Reed-Solomon.")
        return bytes(decoded), errors_corrected
