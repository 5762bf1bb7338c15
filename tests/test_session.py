"""Tests for the session value."""

from __future__ import annotations

import dataclasses

import pytest

from tron_wallet.session import Session


class TestSession:
    def test_empty(self):
        session = Session.empty()
        assert not session.wallet_loaded
        assert session.filename is None

    def test_loaded(self, shasta_wallet):
        session = Session.of(shasta_wallet, "me-shasta.json")
        assert session.wallet_loaded
        assert session.wallet.address == shasta_wallet.address

    def test_is_immutable(self, shasta_wallet):
        session = Session.of(shasta_wallet, "me-shasta.json")
        with pytest.raises(dataclasses.FrozenInstanceError):
            session.filename = "other.json"

    def test_filename_needs_wallet(self):
        with pytest.raises(ValueError):
            Session(filename="orphan.json")
