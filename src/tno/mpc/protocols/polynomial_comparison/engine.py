"""
Protocols for the arithmetic homomorphic-encryption engine.

The protocols in this package never inspect ciphertexts, keys or decryption shares; they only
pass them to an engine that satisfies the structural interfaces below.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, NamedTuple, Protocol

Ciphertext = Any
PublicKey = Any
SecretKey = Any
KeySwitchHint = Any
MultKey = Any
DecryptionShare = Any


class KeyPair(NamedTuple):
    """
    Public and secret key generated by an engine.
    """

    public_key: PublicKey
    secret_key: SecretKey


class ArithmeticEngine(Protocol):
    @property
    def plaintext_modulus(self) -> int: ...

    def encrypt(self, public_key: PublicKey, values: Sequence[int]) -> Ciphertext: ...

    def decrypt(self, secret_key: SecretKey, ciphertext: Ciphertext) -> list[int]: ...

    def add(self, left: Ciphertext, right: Ciphertext) -> Ciphertext: ...

    def subtract(self, left: Ciphertext, right: Ciphertext) -> Ciphertext: ...

    def multiply(self, left: Ciphertext, right: Ciphertext) -> Ciphertext: ...

    def negate(self, ciphertext: Ciphertext) -> Ciphertext: ...

    def sum_slots(self, ciphertext: Ciphertext, batch_size: int) -> Ciphertext: ...

    def generate_key_pair(self) -> KeyPair: ...

    def generate_evaluation_keys(self, secret_key: SecretKey) -> None: ...


class ThresholdEngine(ArithmeticEngine, Protocol):
    def key_switch_hint(
        self, old_secret_key: SecretKey, new_secret_key: SecretKey
    ) -> KeySwitchHint: ...

    def multiparty_key_gen(self, public_key: PublicKey) -> KeyPair: ...

    def extend_key_switch_hint(
        self,
        old_secret_key: SecretKey,
        new_secret_key: SecretKey,
        hint: KeySwitchHint,
    ) -> KeySwitchHint: ...

    def add_hints(
        self, left: KeySwitchHint, right: KeySwitchHint, public_key: PublicKey
    ) -> KeySwitchHint: ...

    def seed_mult_key(
        self, secret_key: SecretKey, hint: KeySwitchHint, public_key: PublicKey
    ) -> MultKey: ...

    def extend_mult_key(
        self, secret_key: SecretKey, hint: KeySwitchHint, public_key: PublicKey
    ) -> MultKey: ...

    def add_mult_keys(self, left: MultKey, right: MultKey) -> MultKey: ...

    def install_mult_key(self, mult_key: MultKey) -> None: ...

    def partial_decrypt_lead(
        self, ciphertext: Ciphertext, secret_key: SecretKey
    ) -> DecryptionShare: ...

    def partial_decrypt_main(
        self, ciphertext: Ciphertext, secret_key: SecretKey
    ) -> DecryptionShare: ...

    def fuse_decryption(self, shares: Sequence[DecryptionShare]) -> list[int]: ...
