"""
Combination of partial decryptions under threshold key material.

The lead holder starts the set, every main holder adds its share in join order and fusion
combines all shares into the plaintext. Omitted, duplicate and out-of-order shares are rejected
before the engine sees them.
"""

from __future__ import annotations

import logging

from .engine import Ciphertext, DecryptionShare
from .errors import ProtocolSequenceViolation
from .threshold import KeyHolder, Ready
from .utils import to_signed

logger = logging.getLogger(__name__)


class PartialDecryption:
    """
    Partial decryptions of one ciphertext, collected from all key holders.
    """

    def __init__(
        self,
        ready: Ready,
        ciphertext: Ciphertext,
        shares: list[DecryptionShare],
    ) -> None:
        """
        Internal constructor, use :meth:`lead` to start a new set.

        :param ready: Completed key combination.
        :param ciphertext: Ciphertext that is decrypted.
        :param shares: Shares collected so far in join order, starting with the lead share.
        :raise ProtocolSequenceViolation: raised when the lead share is missing or there are more
            shares than key holders.
        """
        if not shares:
            raise ProtocolSequenceViolation(
                "The lead share is missing, start the set with PartialDecryption.lead."
            )
        if len(shares) > ready.number_of_holders:
            raise ProtocolSequenceViolation(
                f"Received {len(shares)} shares for {ready.number_of_holders} key holders."
            )
        self._ready = ready
        self._ciphertext = ciphertext
        self._shares = list(shares)
        self._fused = False

    @classmethod
    def lead(
        cls, ready: Ready, ciphertext: Ciphertext, holder: KeyHolder
    ) -> PartialDecryption:
        """
        Start a set with the partial decryption of the lead holder.

        :param ready: Completed key combination.
        :param ciphertext: Ciphertext encrypted under the combined public key.
        :param holder: Key holder 0.
        :return: Set containing the lead share.
        :raise ProtocolSequenceViolation: raised when holder is not the lead holder of ready.
        """
        ready.check_holder(holder, 0)
        share = ready.engine.partial_decrypt_lead(
            ciphertext, holder.key_pair.secret_key
        )
        logger.debug("Key holder 0 added the lead share")
        return cls(ready, ciphertext, [share])

    @property
    def number_of_shares(self) -> int:
        """
        :return: Number of shares collected so far.
        """
        return len(self._shares)

    def add_main(self, holder: KeyHolder) -> PartialDecryption:
        """
        Add the partial decryption of the next main holder.

        :param holder: The next key holder in join order.
        :return: This set, to allow chaining.
        :raise ProtocolSequenceViolation: raised when the set was fused already, every holder
            already contributed or holder is not the next holder.
        """
        if self._fused:
            raise ProtocolSequenceViolation(
                "The partial decryptions were already fused."
            )
        if self.number_of_shares >= self._ready.number_of_holders:
            raise ProtocolSequenceViolation(
                f"All {self._ready.number_of_holders} shares were already added."
            )
        self._ready.check_holder(holder, self.number_of_shares)
        self._shares.append(
            self._ready.engine.partial_decrypt_main(
                self._ciphertext, holder.key_pair.secret_key
            )
        )
        logger.debug("Key holder %d added its share", holder.index)
        return self

    def fuse(self) -> list[int]:
        """
        Combine the shares of all key holders. The set can not be used afterwards.

        :return: Signed representatives of all decrypted slots.
        :raise ProtocolSequenceViolation: raised when a share is missing or the set was fused
            already.
        """
        if self._fused:
            raise ProtocolSequenceViolation(
                "The partial decryptions were already fused."
            )
        if self.number_of_shares < self._ready.number_of_holders:
            raise ProtocolSequenceViolation(
                f"Share of key holder {self.number_of_shares} is missing."
            )
        self._fused = True
        modulus = self._ready.engine.plaintext_modulus
        return [
            to_signed(value, modulus)
            for value in self._ready.engine.fuse_decryption(self._shares)
        ]
