# contracts/mock_verifier/contract.py
#
# On-ledger wrapper around zk.verifiers.risc0.MockReceiptVerifier.
#
# verify(seal, imageId, journalDigest) returns nothing on success and reverts
# with VerificationFailed() otherwise, which is how callers observe rejection.
# The selector is an immutable constructor argument (0xFFFFFFFF for mock
# deployments).

from __future__ import annotations

import logging

from execution.errors import ContractError
from execution.runtime.contracts import Contract, external, register_contract
from zk.verifiers.risc0 import DEFAULT_MOCK_SELECTOR, MockReceiptVerifier, VerificationError

from .abi import VERIFIER_ABI

log = logging.getLogger(__name__)

CODE_NAME = "RiscZeroMockVerifier"
MOCK_SELECTOR = DEFAULT_MOCK_SELECTOR


class VerificationFailed(ContractError):
    signature = "VerificationFailed()"


@register_contract(CODE_NAME)
class RiscZeroMockVerifier(Contract):
    ABI = VERIFIER_ABI

    def __init__(self, ctx, selector: bytes) -> None:
        super().__init__(ctx)
        self.backend = MockReceiptVerifier(selector=bytes(selector))

    @external("verify", view=True)
    def verify(self, seal: bytes, image_id: bytes, journal_digest: bytes) -> None:
        try:
            self.backend.verify(seal, image_id, journal_digest)
        except VerificationError as e:
            log.debug("mock verifier rejected seal: %s", e)
            raise VerificationFailed() from e
