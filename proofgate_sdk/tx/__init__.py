"""proofgate_sdk.tx - build, sign, submit and await transactions."""
