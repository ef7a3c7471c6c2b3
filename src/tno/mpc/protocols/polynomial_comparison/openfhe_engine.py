"""
Arithmetic engine backed by the BGV scheme of OpenFHE.

The parameters mirror the small, insecure test parameters that are convenient for experimenting
with the protocols (ring dimension 16, no security level). Choose secure parameters for any real
deployment.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import openfhe
from tno.mpc.encryption_schemes.utils import is_prime

from .engine import (
    Ciphertext,
    DecryptionShare,
    KeyPair,
    KeySwitchHint,
    MultKey,
    PublicKey,
    SecretKey,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BGVParameters:
    """
    Parameters of a BGV crypto context.

    :param plaintext_modulus: Odd prime plaintext modulus $p$.
    :param multiplicative_depth: Number of sequential multiplications a ciphertext supports.
    :param ring_dimension: Ring dimension; also the number of plaintext slots.
    :param multiparty: If True, the context supports threshold key generation and decryption.
    :param number_of_holders: Number of key holders of a threshold run.
    :raise ValueError: raised when the plaintext modulus is not an odd prime or the depth is not
        positive.
    """

    plaintext_modulus: int
    multiplicative_depth: int
    ring_dimension: int = 16
    multiparty: bool = False
    number_of_holders: int = 2

    def __post_init__(self) -> None:
        if self.plaintext_modulus <= 2 or not is_prime(self.plaintext_modulus):
            raise ValueError(
                f"Plaintext modulus should be an odd prime, received {self.plaintext_modulus}."
            )
        if self.multiplicative_depth < 1:
            raise ValueError(
                f"Multiplicative depth should be positive, received {self.multiplicative_depth}."
            )

    @classmethod
    def from_plaintext_modulus(
        cls,
        plaintext_modulus: int,
        ring_dimension: int = 16,
        multiparty: bool = False,
        number_of_holders: int = 2,
    ) -> BGVParameters:
        r"""
        Derive the multiplicative depth from the plaintext modulus. The power ladder squares
        $\lceil \log_2 p \rceil$ times, evaluating a polynomial and selecting a private-division
        candidate each take one more multiplication.

        :param plaintext_modulus: Odd prime plaintext modulus $p$.
        :param ring_dimension: Ring dimension.
        :param multiparty: If True, the context supports threshold operations.
        :param number_of_holders: Number of key holders of a threshold run.
        :return: Parameters that support every operator of this package.
        """
        return cls(
            plaintext_modulus=plaintext_modulus,
            multiplicative_depth=(plaintext_modulus - 1).bit_length() + 2,
            ring_dimension=ring_dimension,
            multiparty=multiparty,
            number_of_holders=number_of_holders,
        )


class OpenFHEEngine:
    """
    Single-party and threshold BGV engine.
    """

    def __init__(self, parameters: BGVParameters) -> None:
        """
        Generate the crypto context.

        :param parameters: Parameters of the context.
        """
        self.parameters = parameters
        cc_parameters = openfhe.CCParamsBGVRNS()
        cc_parameters.SetPlaintextModulus(parameters.plaintext_modulus)
        cc_parameters.SetMultiplicativeDepth(parameters.multiplicative_depth)
        cc_parameters.SetSecurityLevel(openfhe.HEStd_NotSet)
        cc_parameters.SetRingDim(parameters.ring_dimension)
        cc_parameters.SetKeySwitchTechnique(openfhe.HYBRID)
        cc_parameters.SetScalingTechnique(openfhe.FIXEDAUTO)
        if parameters.multiparty:
            cc_parameters.SetMultipartyMode(openfhe.NOISE_FLOODING_MULTIPARTY)
            cc_parameters.SetThresholdNumOfParties(parameters.number_of_holders)

        self.crypto_context = openfhe.GenCryptoContext(cc_parameters)
        features = ["PKE", "KEYSWITCH", "LEVELEDSHE", "ADVANCEDSHE"]
        if parameters.multiparty:
            features.append("MULTIPARTY")
        for feature in features:
            self.crypto_context.Enable(getattr(openfhe.PKESchemeFeature, feature))
        logger.debug("Generated BGV crypto context with %s", parameters)

    @property
    def plaintext_modulus(self) -> int:
        return self.parameters.plaintext_modulus

    @property
    def batch_size(self) -> int:
        """
        :return: Number of plaintext slots of a ciphertext.
        """
        return int(self.crypto_context.GetRingDimension())

    def encrypt(self, public_key: PublicKey, values: Sequence[int]) -> Ciphertext:
        plaintext = self.crypto_context.MakePackedPlaintext(list(values))
        return self.crypto_context.Encrypt(public_key, plaintext)

    def decrypt(self, secret_key: SecretKey, ciphertext: Ciphertext) -> list[int]:
        plaintext = self.crypto_context.Decrypt(ciphertext, secret_key)
        plaintext.SetLength(self.batch_size)
        return list(plaintext.GetPackedValue())

    def add(self, left: Ciphertext, right: Ciphertext) -> Ciphertext:
        return self.crypto_context.EvalAdd(left, right)

    def subtract(self, left: Ciphertext, right: Ciphertext) -> Ciphertext:
        return self.crypto_context.EvalSub(left, right)

    def multiply(self, left: Ciphertext, right: Ciphertext) -> Ciphertext:
        return self.crypto_context.EvalMult(left, right)

    def negate(self, ciphertext: Ciphertext) -> Ciphertext:
        return self.crypto_context.EvalNegate(ciphertext)

    def sum_slots(self, ciphertext: Ciphertext, batch_size: int) -> Ciphertext:
        """
        Sum the first batch_size slots into the first slot.

        :param ciphertext: Batched ciphertext.
        :param batch_size: Number of summed slots, a power of two.
        :return: Ciphertext whose first slot holds the sum.
        :raise ValueError: raised when batch_size is not a power of two.
        """
        if batch_size < 1 or batch_size & (batch_size - 1):
            raise ValueError(
                f"Batch size should be a power of two, received {batch_size}."
            )
        return self.crypto_context.EvalSum(ciphertext, batch_size)

    def generate_key_pair(self) -> KeyPair:
        key_pair = self.crypto_context.KeyGen()
        return KeyPair(key_pair.publicKey, key_pair.secretKey)

    def generate_evaluation_keys(self, secret_key: SecretKey) -> None:
        self.crypto_context.EvalMultKeyGen(secret_key)
        self.crypto_context.EvalSumKeyGen(secret_key)

    def key_switch_hint(
        self, old_secret_key: SecretKey, new_secret_key: SecretKey
    ) -> KeySwitchHint:
        return self.crypto_context.KeySwitchGen(old_secret_key, new_secret_key)

    def multiparty_key_gen(self, public_key: PublicKey) -> KeyPair:
        key_pair = self.crypto_context.MultipartyKeyGen(public_key)
        return KeyPair(key_pair.publicKey, key_pair.secretKey)

    def extend_key_switch_hint(
        self,
        old_secret_key: SecretKey,
        new_secret_key: SecretKey,
        hint: KeySwitchHint,
    ) -> KeySwitchHint:
        return self.crypto_context.MultiKeySwitchGen(
            old_secret_key, new_secret_key, hint
        )

    def add_hints(
        self, left: KeySwitchHint, right: KeySwitchHint, public_key: PublicKey
    ) -> KeySwitchHint:
        return self.crypto_context.MultiAddEvalKeys(left, right, public_key.GetKeyTag())

    def seed_mult_key(
        self, secret_key: SecretKey, hint: KeySwitchHint, public_key: PublicKey
    ) -> MultKey:
        return self.crypto_context.MultiMultEvalKey(
            secret_key, hint, public_key.GetKeyTag()
        )

    def extend_mult_key(
        self, secret_key: SecretKey, hint: KeySwitchHint, public_key: PublicKey
    ) -> MultKey:
        return self.seed_mult_key(secret_key, hint, public_key)

    def add_mult_keys(self, left: MultKey, right: MultKey) -> MultKey:
        return self.crypto_context.MultiAddEvalMultKeys(left, right, left.GetKeyTag())

    def install_mult_key(self, mult_key: MultKey) -> None:
        self.crypto_context.InsertEvalMultKey([mult_key])

    def partial_decrypt_lead(
        self, ciphertext: Ciphertext, secret_key: SecretKey
    ) -> DecryptionShare:
        return self.crypto_context.MultipartyDecryptLead([ciphertext], secret_key)[0]

    def partial_decrypt_main(
        self, ciphertext: Ciphertext, secret_key: SecretKey
    ) -> DecryptionShare:
        return self.crypto_context.MultipartyDecryptMain([ciphertext], secret_key)[0]

    def fuse_decryption(self, shares: Sequence[DecryptionShare]) -> list[int]:
        plaintext = self.crypto_context.MultipartyDecryptFusion(list(shares))
        plaintext.SetLength(self.batch_size)
        return list(plaintext.GetPackedValue())
