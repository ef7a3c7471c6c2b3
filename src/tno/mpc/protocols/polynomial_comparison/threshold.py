r"""
Key-combination protocol for threshold homomorphic encryption with $n \geq 2$ key holders.

The protocol is a strictly ordered sequence of rounds. Every round is a transition method that
only exists on the state in which it is valid; calling it consumes the state and returns the
next one, so a state can be used at most once:

.. code-block:: python

    initialized, lead = KeyCombination.start(engine, number_of_holders=2)
    joined, holder = initialized.join()
    ready = (
        joined.accumulate_added(holder)
        .seed_final(lead)
        .accumulate_final(holder)
        .install()
    )
    context = ready.context()

Every holder keeps its own :class:`KeyHolder`; the states only retain public keys and the
accumulated evaluation keys.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .context import EvaluationContext, ThresholdKeys
from .engine import KeyPair, KeySwitchHint, MultKey, PublicKey, ThresholdEngine
from .errors import ProtocolSequenceViolation

logger = logging.getLogger(__name__)

TRANSITIONS = frozenset(
    ("join", "accumulate_added", "seed_final", "accumulate_final", "install")
)


@dataclass(frozen=True)
class KeyHolder:
    """
    A participant of the threshold protocol together with its key share. Holder 0 is the lead,
    the other holders are numbered in the order in which they joined.
    """

    index: int
    key_pair: KeyPair

    @property
    def is_lead(self) -> bool:
        """
        :return: True if this holder is the lead holder.
        """
        return self.index == 0


class ProtocolState:
    """
    Base class of all protocol states. A state only defines the transitions that are valid in
    it; calling any other transition raises :class:`ProtocolSequenceViolation`.
    """

    def __init__(
        self,
        engine: ThresholdEngine,
        number_of_holders: int,
        public_keys: tuple[PublicKey, ...],
    ) -> None:
        """
        :param engine: Engine that performs the key operations.
        :param number_of_holders: Total number of key holders $n$.
        :param public_keys: Public keys in join order; the last one is the combined public key
            of all holders that joined so far.
        """
        self._engine = engine
        self._number_of_holders = number_of_holders
        self._public_keys = public_keys
        self._consumed = False

    @property
    def number_of_holders(self) -> int:
        """
        :return: Total number of key holders.
        """
        return self._number_of_holders

    @property
    def public_key(self) -> PublicKey:
        """
        :return: Combined public key of all holders that joined so far.
        """
        return self._public_keys[-1]

    def _consume(self) -> None:
        if self._consumed:
            raise ProtocolSequenceViolation(
                f"{type(self).__name__} was already used, continue from the state it returned."
            )
        self._consumed = True

    def _check_holder(self, holder: KeyHolder, expected_index: int) -> None:
        """
        Check that holder is the registered holder with the expected index.

        :param holder: Holder that performs the transition.
        :param expected_index: Index of the holder whose turn it is.
        :raise ProtocolSequenceViolation: raised when it is not the holder's turn.
        """
        if holder.index != expected_index:
            raise ProtocolSequenceViolation(
                f"Expected key holder {expected_index} in {type(self).__name__}, "
                f"received key holder {holder.index}."
            )
        if holder.key_pair.public_key is not self._public_keys[expected_index]:
            raise ProtocolSequenceViolation(
                f"Key holder {holder.index} did not join this protocol run."
            )

    def _extend_added(
        self, hint: KeySwitchHint, holder: KeyHolder, index: int
    ) -> AddedAccumulated:
        """
        Let holder extend the additive key-switching hint with its secret key.

        :param hint: Hint accumulated so far.
        :param holder: Holder that extends the hint.
        :param index: Index of the holder whose turn it is.
        :return: State holding the extended hint.
        """
        self._check_holder(holder, index)
        self._consume()
        secret_key = holder.key_pair.secret_key
        extension = self._engine.extend_key_switch_hint(secret_key, secret_key, hint)
        hint = self._engine.add_hints(hint, extension, self._public_keys[index])
        logger.debug("Key holder %d extended the additive hint", index)
        return AddedAccumulated(
            self._engine, self._number_of_holders, self._public_keys, hint, index + 1
        )

    def _invalid(self, transition: str) -> ProtocolSequenceViolation:
        return ProtocolSequenceViolation(
            f"Transition {transition} is not valid in state {type(self).__name__}."
        )

    if not TYPE_CHECKING:
        # Transitions only exist on the states where they are valid.
        def __getattr__(self, name: str) -> Any:
            if name in TRANSITIONS:
                raise self._invalid(name)
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            )


class KeyCombination:
    """
    Entry point of the key-combination protocol.
    """

    @staticmethod
    def start(
        engine: ThresholdEngine, number_of_holders: int
    ) -> tuple[Initialized, KeyHolder]:
        """
        Let the lead holder generate its key pair and the key-switching hint of its secret key
        onto itself.

        :param engine: Engine that performs the key operations.
        :param number_of_holders: Total number of key holders, at least two.
        :return: The initial state and the lead key holder.
        :raise ValueError: raised when fewer than two key holders are requested.
        """
        if number_of_holders < 2:
            raise ValueError(
                f"Threshold encryption needs at least two key holders, received {number_of_holders}."
            )
        key_pair = engine.generate_key_pair()
        hint = engine.key_switch_hint(key_pair.secret_key, key_pair.secret_key)
        logger.debug("Key holder 0 started a run with %d holders", number_of_holders)
        state = Initialized(engine, number_of_holders, (key_pair.public_key,), hint)
        return state, KeyHolder(0, key_pair)


class Initialized(ProtocolState):
    """
    Only the lead holder has a key pair.
    """

    def __init__(
        self,
        engine: ThresholdEngine,
        number_of_holders: int,
        public_keys: tuple[PublicKey, ...],
        hint: KeySwitchHint,
    ) -> None:
        super().__init__(engine, number_of_holders, public_keys)
        self._hint = hint

    def join(self) -> tuple[Joined, KeyHolder]:
        """
        Let the next holder generate its key share on top of the current combined public key.

        :return: The next state and the new key holder.
        :raise ProtocolSequenceViolation: raised when the state was used before or every holder
            already joined.
        """
        if len(self._public_keys) >= self._number_of_holders:
            raise ProtocolSequenceViolation(
                f"All {self._number_of_holders} key holders already joined."
            )
        self._consume()
        index = len(self._public_keys)
        key_pair = self._engine.multiparty_key_gen(self.public_key)
        logger.debug("Key holder %d joined", index)
        state = Joined(
            self._engine,
            self._number_of_holders,
            self._public_keys + (key_pair.public_key,),
            self._hint,
        )
        return state, KeyHolder(index, key_pair)


class Joined(Initialized):
    """
    One or more main holders joined. Further holders may join until all $n$ are present, after
    which the additive key-switching hint is accumulated starting with holder 1.
    """

    def accumulate_added(self, holder: KeyHolder) -> AddedAccumulated:
        """
        :param holder: Key holder 1.
        :return: State with the hint extended by holder 1.
        :raise ProtocolSequenceViolation: raised when not every holder joined yet, the state
            was used before or holder is not key holder 1.
        """
        if len(self._public_keys) < self._number_of_holders:
            raise ProtocolSequenceViolation(
                f"Only {len(self._public_keys)} of {self._number_of_holders} key holders joined."
            )
        return self._extend_added(self._hint, holder, 1)


class AddedAccumulated(ProtocolState):
    """
    The additive key-switching hint contains the secret keys of holders $0, \\ldots, k$.
    """

    def __init__(
        self,
        engine: ThresholdEngine,
        number_of_holders: int,
        public_keys: tuple[PublicKey, ...],
        hint: KeySwitchHint,
        next_index: int,
    ) -> None:
        super().__init__(engine, number_of_holders, public_keys)
        self._hint = hint
        self._next_index = next_index

    def accumulate_added(self, holder: KeyHolder) -> AddedAccumulated:
        """
        :param holder: The next key holder in join order.
        :return: State with the hint extended by holder.
        :raise ProtocolSequenceViolation: raised when the state was used before, every holder
            already contributed or holder is not the next holder.
        """
        if self._next_index >= self._number_of_holders:
            raise ProtocolSequenceViolation(
                "Every key holder already extended the additive hint."
            )
        return self._extend_added(self._hint, holder, self._next_index)

    def seed_final(self, lead: KeyHolder) -> FinalSeeded:
        """
        Let the lead holder produce the first term of the multiplication key from the fully
        accumulated hint.

        :param lead: Key holder 0.
        :return: State holding the first multiplication-key term.
        :raise ProtocolSequenceViolation: raised when not every holder extended the hint, the
            state was used before or lead is not key holder 0.
        """
        if self._next_index < self._number_of_holders:
            raise ProtocolSequenceViolation(
                f"Key holder {self._next_index} did not extend the additive hint yet."
            )
        self._check_holder(lead, 0)
        self._consume()
        mult_key = self._engine.seed_mult_key(
            lead.key_pair.secret_key, self._hint, self.public_key
        )
        logger.debug("Key holder 0 seeded the multiplication key")
        return FinalSeeded(
            self._engine,
            self._number_of_holders,
            self._public_keys,
            self._hint,
            mult_key,
            1,
        )


class FinalAccumulated(ProtocolState):
    """
    The multiplication key contains the terms of holders $0, \\ldots, k$.
    """

    def __init__(
        self,
        engine: ThresholdEngine,
        number_of_holders: int,
        public_keys: tuple[PublicKey, ...],
        hint: KeySwitchHint,
        mult_key: MultKey,
        next_index: int,
    ) -> None:
        super().__init__(engine, number_of_holders, public_keys)
        self._hint = hint
        self._mult_key = mult_key
        self._next_index = next_index

    def accumulate_final(self, holder: KeyHolder) -> FinalAccumulated:
        """
        Let the next holder, in the same order as for the additive hint, fold its term into the
        multiplication key.

        :param holder: The next key holder in join order.
        :return: State with the extended multiplication key.
        :raise ProtocolSequenceViolation: raised when the state was used before, every holder
            already contributed or holder is not the next holder.
        """
        if self._next_index >= self._number_of_holders:
            raise ProtocolSequenceViolation(
                "Every key holder already extended the multiplication key."
            )
        self._check_holder(holder, self._next_index)
        self._consume()
        term = self._engine.extend_mult_key(
            holder.key_pair.secret_key, self._hint, self.public_key
        )
        mult_key = self._engine.add_mult_keys(term, self._mult_key)
        logger.debug("Key holder %d extended the multiplication key", holder.index)
        return FinalAccumulated(
            self._engine,
            self._number_of_holders,
            self._public_keys,
            self._hint,
            mult_key,
            self._next_index + 1,
        )

    def install(self) -> Ready:
        """
        Insert the multiplication key into the engine.

        :return: The terminal state.
        :raise ProtocolSequenceViolation: raised when the state was used before or not every
            holder extended the multiplication key.
        """
        if self._next_index < self._number_of_holders:
            raise ProtocolSequenceViolation(
                f"Key holder {self._next_index} did not extend the multiplication key yet."
            )
        self._consume()
        self._engine.install_mult_key(self._mult_key)
        logger.debug("Installed the combined multiplication key")
        return Ready(self._engine, self._number_of_holders, self._public_keys)


class FinalSeeded(FinalAccumulated):
    """
    The lead holder seeded the multiplication key; the main holders extend it next.
    """


class Ready(ProtocolState):
    """
    Terminal state: the combined multiplication key is installed and operators may run on
    ciphertexts encrypted under the combined public key. This state is not consumed by use.
    """

    @property
    def engine(self) -> ThresholdEngine:
        """
        :return: Engine holding the combined multiplication key.
        """
        return self._engine

    @property
    def key_material(self) -> ThresholdKeys:
        """
        :return: Key material for an evaluation context.
        """
        return ThresholdKeys(self.public_key, self._number_of_holders)

    def context(self) -> EvaluationContext:
        """
        :return: Evaluation context under the combined public key.
        """
        return EvaluationContext(self._engine, self.key_material)

    def check_holder(self, holder: KeyHolder, expected_index: int) -> None:
        """
        Check that holder is the registered holder with the expected index.

        :param holder: Holder that wants to take part.
        :param expected_index: Index of the holder whose turn it is.
        :raise ProtocolSequenceViolation: raised when it is not the holder's turn.
        """
        self._check_holder(holder, expected_index)
