"""
Pytest fixtures.
"""

# pylint: disable=redefined-outer-name
from __future__ import annotations

import itertools
import random
import warnings
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import pytest

from tno.mpc.protocols.polynomial_comparison import (
    DivisionUndefinedWarning,
    EvaluationContext,
    KeyCombination,
    KeyHolder,
    KeyPair,
    Ready,
    SinglePartyKeys,
    ThresholdEngine,
)
from tno.mpc.protocols.polynomial_comparison.threshold import FinalAccumulated

SLOTS = 16
SMALL_PRIMES = (7, 11, 13)
PAPER_PRIME = 257


@dataclass(frozen=True)
class FakeSecretKey:
    """
    Secret key of the plaintext engine, identified by a unique number.
    """

    identifier: int


@dataclass(frozen=True)
class FakePublicKey:
    """
    Public key of the plaintext engine. It records which secret keys are needed to decrypt.
    """

    tag: int
    secrets: frozenset[int]


@dataclass(frozen=True)
class FakeCiphertext:
    """
    Ciphertext of the plaintext engine: the slot values in the clear and the tag of the public
    key they were encrypted under.
    """

    values: tuple[int, ...]
    tag: int


@dataclass(frozen=True)
class FakeHint:
    """
    Key-switching hint, recording the secret keys it encapsulates.
    """

    secrets: frozenset[int]


@dataclass(frozen=True)
class FakeMultKey:
    """
    Multiplication key term, recording the secret keys that contributed and the hint it was
    derived from.
    """

    secrets: frozenset[int]
    hint: frozenset[int]
    tag: int


@dataclass(frozen=True)
class FakeShare:
    """
    Partial decryption of a single key holder.
    """

    values: tuple[int, ...]
    tag: int
    secret: int
    lead: bool


class PlaintextEngine:
    """
    Engine that keeps all values in the clear, while tracking keys like a real threshold
    scheme would. Multiplying requires an installed multiplication key, decrypting requires the
    right secret key and fusing requires one lead share followed by exactly one share of every
    other key holder. Like a real engine, an incomplete set of shares fuses to garbage.
    """

    def __init__(self, plaintext_modulus: int) -> None:
        """
        :param plaintext_modulus: Plaintext modulus $p$.
        """
        self._plaintext_modulus = plaintext_modulus
        self._counter = itertools.count()
        self._public_keys: dict[int, FakePublicKey] = {}
        self._mult_tags: set[int] = set()
        self._sum_tags: set[int] = set()
        self.multiplications = 0

    @property
    def plaintext_modulus(self) -> int:
        return self._plaintext_modulus

    def _new_key_pair(self, secrets: frozenset[int]) -> KeyPair:
        secret_key = FakeSecretKey(next(self._counter))
        public_key = FakePublicKey(
            next(self._counter), secrets | {secret_key.identifier}
        )
        self._public_keys[public_key.tag] = public_key
        return KeyPair(public_key, secret_key)

    def _same_tag(self, left: FakeCiphertext, right: FakeCiphertext) -> int:
        if left.tag != right.tag:
            raise ValueError("Ciphertexts are encrypted under different keys.")
        return left.tag

    def encrypt(
        self, public_key: FakePublicKey, values: Sequence[int]
    ) -> FakeCiphertext:
        if len(values) > SLOTS:
            raise ValueError(f"At most {SLOTS} values fit in a ciphertext.")
        padded = list(values) + [0] * (SLOTS - len(values))
        return FakeCiphertext(
            tuple(value % self._plaintext_modulus for value in padded), public_key.tag
        )

    def decrypt(
        self, secret_key: FakeSecretKey, ciphertext: FakeCiphertext
    ) -> list[int]:
        if self._public_keys[ciphertext.tag].secrets != {secret_key.identifier}:
            raise ValueError("Secret key does not match the ciphertext.")
        return list(ciphertext.values)

    def add(self, left: FakeCiphertext, right: FakeCiphertext) -> FakeCiphertext:
        return FakeCiphertext(
            tuple(
                (a + b) % self._plaintext_modulus
                for a, b in zip(left.values, right.values)
            ),
            self._same_tag(left, right),
        )

    def subtract(self, left: FakeCiphertext, right: FakeCiphertext) -> FakeCiphertext:
        return FakeCiphertext(
            tuple(
                (a - b) % self._plaintext_modulus
                for a, b in zip(left.values, right.values)
            ),
            self._same_tag(left, right),
        )

    def multiply(self, left: FakeCiphertext, right: FakeCiphertext) -> FakeCiphertext:
        tag = self._same_tag(left, right)
        if tag not in self._mult_tags:
            raise ValueError("No multiplication key is installed for this key.")
        self.multiplications += 1
        return FakeCiphertext(
            tuple(
                a * b % self._plaintext_modulus
                for a, b in zip(left.values, right.values)
            ),
            tag,
        )

    def negate(self, ciphertext: FakeCiphertext) -> FakeCiphertext:
        return FakeCiphertext(
            tuple(-value % self._plaintext_modulus for value in ciphertext.values),
            ciphertext.tag,
        )

    def sum_slots(self, ciphertext: FakeCiphertext, batch_size: int) -> FakeCiphertext:
        if ciphertext.tag not in self._sum_tags:
            raise ValueError("No summation key is installed for this key.")
        total = sum(ciphertext.values[:batch_size]) % self._plaintext_modulus
        return FakeCiphertext((total,) * SLOTS, ciphertext.tag)

    def generate_key_pair(self) -> KeyPair:
        return self._new_key_pair(frozenset())

    def generate_evaluation_keys(self, secret_key: FakeSecretKey) -> None:
        for public_key in self._public_keys.values():
            if public_key.secrets == {secret_key.identifier}:
                self._mult_tags.add(public_key.tag)
                self._sum_tags.add(public_key.tag)

    def key_switch_hint(
        self, old_secret_key: FakeSecretKey, new_secret_key: FakeSecretKey
    ) -> FakeHint:
        assert old_secret_key == new_secret_key
        return FakeHint(frozenset({old_secret_key.identifier}))

    def multiparty_key_gen(self, public_key: FakePublicKey) -> KeyPair:
        return self._new_key_pair(public_key.secrets)

    def extend_key_switch_hint(
        self,
        old_secret_key: FakeSecretKey,
        new_secret_key: FakeSecretKey,
        hint: FakeHint,
    ) -> FakeHint:
        assert old_secret_key == new_secret_key
        return FakeHint(frozenset({old_secret_key.identifier}))

    def add_hints(
        self, left: FakeHint, right: FakeHint, public_key: FakePublicKey
    ) -> FakeHint:
        return FakeHint(left.secrets | right.secrets)

    def seed_mult_key(
        self, secret_key: FakeSecretKey, hint: FakeHint, public_key: FakePublicKey
    ) -> FakeMultKey:
        return FakeMultKey(
            frozenset({secret_key.identifier}), hint.secrets, public_key.tag
        )

    def extend_mult_key(
        self, secret_key: FakeSecretKey, hint: FakeHint, public_key: FakePublicKey
    ) -> FakeMultKey:
        return self.seed_mult_key(secret_key, hint, public_key)

    def add_mult_keys(self, left: FakeMultKey, right: FakeMultKey) -> FakeMultKey:
        assert left.hint == right.hint
        return FakeMultKey(left.secrets | right.secrets, left.hint, left.tag)

    def install_mult_key(self, mult_key: FakeMultKey) -> None:
        expected = self._public_keys[mult_key.tag].secrets
        if mult_key.secrets != expected or mult_key.hint != expected:
            raise ValueError("Incomplete multiplication key.")
        self._mult_tags.add(mult_key.tag)

    def partial_decrypt_lead(
        self, ciphertext: FakeCiphertext, secret_key: FakeSecretKey
    ) -> FakeShare:
        return FakeShare(
            ciphertext.values, ciphertext.tag, secret_key.identifier, lead=True
        )

    def partial_decrypt_main(
        self, ciphertext: FakeCiphertext, secret_key: FakeSecretKey
    ) -> FakeShare:
        return FakeShare(
            ciphertext.values, ciphertext.tag, secret_key.identifier, lead=False
        )

    def fuse_decryption(self, shares: Sequence[FakeShare]) -> list[int]:
        secrets = [share.secret for share in shares]
        complete = (
            shares[0].lead
            and not any(share.lead for share in shares[1:])
            and len(set(secrets)) == len(secrets)
            and set(secrets) == self._public_keys[shares[0].tag].secrets
        )
        if complete:
            return list(shares[0].values)
        return [random.randrange(self._plaintext_modulus) for _ in range(SLOTS)]


def make_context(plaintext_modulus: int) -> EvaluationContext:
    """
    Helper function to create a single-party context on the plaintext engine.

    :param plaintext_modulus: Plaintext modulus $p$.
    :return: Evaluation context.
    """
    engine = PlaintextEngine(plaintext_modulus)
    return EvaluationContext(engine, SinglePartyKeys.generate(engine))


def run_key_combination(
    engine: ThresholdEngine, number_of_holders: int
) -> tuple[Ready, list[KeyHolder]]:
    """
    Helper function that runs the complete key-combination protocol.

    :param engine: Engine performing the key operations.
    :param number_of_holders: Number of key holders.
    :return: Terminal state and all key holders in join order.
    """
    initialized, lead = KeyCombination.start(engine, number_of_holders)
    joined, holder = initialized.join()
    holders = [lead, holder]
    for _ in range(2, number_of_holders):
        joined, holder = joined.join()
        holders.append(holder)
    added = joined.accumulate_added(holders[1])
    for holder in holders[2:]:
        added = added.accumulate_added(holder)
    final: FinalAccumulated = added.seed_final(lead)
    for holder in holders[1:]:
        final = final.accumulate_final(holder)
    return final.install(), holders


@pytest.fixture
def _error_on_division_warnings() -> Iterator[None]:
    """
    Wrapper that turns division warnings into errors.

    :return: Context with custom warningfilters.
    """
    with warnings.catch_warnings():
        warnings.simplefilter("error", DivisionUndefinedWarning)
        yield


@pytest.fixture(params=SMALL_PRIMES)
def small_context(
    request: pytest.FixtureRequest, _error_on_division_warnings: None
) -> EvaluationContext:
    """
    Single-party context for every small plaintext modulus.

    :param request: Pytest request, holding the plaintext modulus.
    :return: Evaluation context.
    """
    return make_context(request.param)


@pytest.fixture(scope="module")
def paper_context() -> EvaluationContext:
    """
    Single-party context with the plaintext modulus 257.

    :return: Evaluation context.
    """
    return make_context(PAPER_PRIME)


@pytest.fixture
def threshold_engine() -> PlaintextEngine:
    """
    Plaintext engine for threshold tests with modulus 13.

    :return: Plaintext engine.
    """
    return PlaintextEngine(13)
