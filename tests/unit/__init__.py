"""
tests.unit
==========

Fast, dependency-light checks of the core codecs: ABI helpers, the journal
codec and transaction signing. Shared fixtures come from the root conftest.
"""
