"""proofgate_sdk.contracts - contract client, revert decoding and deployment."""
