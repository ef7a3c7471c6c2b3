"""
Read-only evaluation context shared by all homomorphic operators.

The context couples an engine to the key material under which ciphertexts are produced. Single
party and threshold deployments only differ in their key material; every operator in this package
is written once against the context.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from tno.mpc.encryption_schemes.utils import is_prime

from .engine import ArithmeticEngine, Ciphertext, KeyPair, PublicKey, SecretKey
from .utils import check_in_domain, to_signed


@runtime_checkable
class KeyMaterial(Protocol):
    @property
    def public_key(self) -> PublicKey: ...


@dataclass(frozen=True)
class SinglePartyKeys:
    """
    Key material of a single key holder that can decrypt on its own.
    """

    key_pair: KeyPair

    @property
    def public_key(self) -> PublicKey:
        """
        :return: Public key used for encryption.
        """
        return self.key_pair.public_key

    @property
    def secret_key(self) -> SecretKey:
        """
        :return: Secret key used for decryption.
        """
        return self.key_pair.secret_key

    @classmethod
    def generate(cls, engine: ArithmeticEngine) -> SinglePartyKeys:
        """
        Generate a key pair together with the evaluation keys needed for homomorphic
        multiplication and slot summation.

        :param engine: Engine that generates the keys.
        :return: Fresh single-party key material.
        """
        key_pair = engine.generate_key_pair()
        engine.generate_evaluation_keys(key_pair.secret_key)
        return cls(key_pair)


@dataclass(frozen=True)
class ThresholdKeys:
    """
    Key material resulting from a completed key-combination protocol. Only the combined public key
    is known; decryption requires a share of every holder.
    """

    public_key: PublicKey
    number_of_holders: int


@dataclass(frozen=True)
class EvaluationContext:
    r"""
    Immutable pairing of an engine and key material.

    :param engine: Arithmetic engine performing the homomorphic operations.
    :param key_material: Key material providing the public key under which fresh ciphertexts
        (inputs, constants, encrypted coefficients) are produced.
    :raise ValueError: raised when the plaintext modulus of the engine is not an odd prime.
    """

    engine: ArithmeticEngine
    key_material: KeyMaterial

    def __post_init__(self) -> None:
        modulus = self.engine.plaintext_modulus
        if modulus <= 2 or not is_prime(modulus):
            raise ValueError(
                f"Plaintext modulus should be an odd prime, received {modulus}."
            )

    @property
    def plaintext_modulus(self) -> int:
        """
        :return: Plaintext modulus $p$.
        """
        return self.engine.plaintext_modulus

    @property
    def public_key(self) -> PublicKey:
        """
        :return: Public key of the key material.
        """
        return self.key_material.public_key

    def encrypt(self, value: int) -> Ciphertext:
        r"""
        Encrypt a caller-supplied integer.

        :param value: Integer in $[-(p-1)/2, (p-1)/2]$.
        :return: Encryption of value in the first slot.
        :raise DomainOutOfRange: raised when value lies outside the plaintext domain.
        """
        check_in_domain(value, self.plaintext_modulus)
        return self.engine.encrypt(self.public_key, [value])

    def encrypt_vector(self, values: Sequence[int]) -> Ciphertext:
        r"""
        Encrypt a vector of caller-supplied integers, one per slot.

        :param values: Integers in $[-(p-1)/2, (p-1)/2]$.
        :return: Batched encryption of values.
        :raise DomainOutOfRange: raised when one of the values lies outside the plaintext domain.
        """
        for value in values:
            check_in_domain(value, self.plaintext_modulus)
        return self.engine.encrypt(self.public_key, list(values))

    def encrypt_constant(self, value: int, batch_size: int = 1) -> Ciphertext:
        """
        Encrypt a residue that is produced internally, e.g. a polynomial coefficient.

        :param value: Any integer, it is reduced to its signed representative.
        :param batch_size: Number of slots the constant is replicated over.
        :return: Encryption of the constant.
        """
        return self.engine.encrypt(
            self.public_key, [to_signed(value, self.plaintext_modulus)] * batch_size
        )

    def decrypt(self, ciphertext: Ciphertext) -> list[int]:
        """
        Decrypt a ciphertext with single-party key material.

        :param ciphertext: Ciphertext to decrypt.
        :return: Signed representatives of all decrypted slots.
        :raise ValueError: raised when the key material cannot decrypt on its own.
        """
        if not isinstance(self.key_material, SinglePartyKeys):
            raise ValueError(
                "Threshold key material requires a partial decryption by every key holder."
            )
        return [
            to_signed(value, self.plaintext_modulus)
            for value in self.engine.decrypt(self.key_material.secret_key, ciphertext)
        ]

    def decrypt_value(self, ciphertext: Ciphertext) -> int:
        """
        Decrypt the first slot of a ciphertext with single-party key material.

        :param ciphertext: Ciphertext to decrypt.
        :return: Signed representative of the first slot.
        """
        return self.decrypt(ciphertext)[0]
