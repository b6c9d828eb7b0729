"""
tests/test_account_import_service.py

Unit tests for AccountImportService against the in-memory FakeAccountStore.

Coverage
--------
- Mixed batch: valid, empty-name and unknown-status candidates
- All-valid batches import every record in input order
- Store failures are isolated to their own candidate
- Decode failures abort before any store call
- Candidate limit and upload size limit
- Unexpected store exceptions propagate
- Report serialization for the API and CLI
"""

from __future__ import annotations

import io

import pytest
from fastapi import UploadFile

from app.domain.account_import import ImportFailureKind
from app.parsers.literal_parser import MalformedPayloadError, PayloadTooLargeError
from app.schemas.accounts import ImportReportResponse
from app.services.account_import_service import AccountImportService
from conftest import FakeAccountStore


SCENARIO = [
    {"name": "Acme", "status": "active"},
    {"name": ""},
    {"name": "Beta", "status": "bogus"},
]


# ---------------------------------------------------------------------------
# import_candidates
# ---------------------------------------------------------------------------


class TestImportCandidates:
    def test_mixed_batch_partitions_into_report(
        self, import_service: AccountImportService, store: FakeAccountStore
    ) -> None:
        report = import_service.import_candidates(candidates=SCENARIO, store=store)

        assert report.imported == 1
        assert report.errors == 2
        assert report.total == len(SCENARIO)
        assert [account.name for account in report.accounts] == ["Acme"]
        assert report.accounts[0].id == 1

        empty_name, bad_status = report.error_details
        assert empty_name.candidate == {"name": ""}
        assert empty_name.kind == ImportFailureKind.VALIDATION
        assert [v.field for v in empty_name.violations] == ["name"]
        assert bad_status.candidate == {"name": "Beta", "status": "bogus"}
        assert [v.field for v in bad_status.violations] == ["status"]
        assert "status" in bad_status.message

    def test_invalid_candidates_never_reach_the_store(
        self, import_service: AccountImportService, store: FakeAccountStore
    ) -> None:
        import_service.import_candidates(candidates=SCENARIO, store=store)

        assert store.create_calls == 1
        assert [account.name for account in store.accounts.values()] == ["Acme"]

    @pytest.mark.parametrize("count", [0, 1, 5, 25])
    def test_all_valid_batch_imports_everything_in_order(
        self, import_service: AccountImportService, store: FakeAccountStore, count: int
    ) -> None:
        candidates = [{"name": f"Account {index}"} for index in range(count)]

        report = import_service.import_candidates(candidates=candidates, store=store)

        assert report.imported == count
        assert report.errors == 0
        assert [account.name for account in report.accounts] == [c["name"] for c in candidates]
        assert [account.id for account in report.accounts] == list(range(1, count + 1))

    def test_error_details_follow_input_order(
        self, import_service: AccountImportService, store: FakeAccountStore
    ) -> None:
        candidates = [
            {"name": "ok-1"},
            "just a string",
            {"name": "ok-2", "status": "inactive"},
            {"name": 3},
            None,
            {"name": "ok-3", "nickname": "x"},
        ]

        report = import_service.import_candidates(candidates=candidates, store=store)

        assert report.imported + report.errors == len(candidates)
        assert [a.name for a in report.accounts] == ["ok-1", "ok-2"]
        assert [f.candidate for f in report.error_details] == [
            "just a string",
            {"name": 3},
            None,
            {"name": "ok-3", "nickname": "x"},
        ]

    def test_store_failure_is_isolated(self, import_service: AccountImportService) -> None:
        store = FakeAccountStore(fail_on_names={"Broken"})
        candidates = [{"name": "First"}, {"name": "Broken"}, {"name": "Last"}]

        report = import_service.import_candidates(candidates=candidates, store=store)

        assert [a.name for a in report.accounts] == ["First", "Last"]
        assert report.errors == 1
        failure = report.error_details[0]
        assert failure.kind == ImportFailureKind.STORE
        assert failure.candidate == {"name": "Broken"}
        assert failure.violations == []
        assert "duplicate name" in failure.message
        assert store.create_calls == 3

    def test_unexpected_store_exception_propagates(
        self, import_service: AccountImportService, store: FakeAccountStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def _explode(payload: object) -> None:
            raise RuntimeError("connection pool exhausted")

        monkeypatch.setattr(store, "create_account", _explode)

        with pytest.raises(RuntimeError):
            import_service.import_candidates(candidates=[{"name": "A"}], store=store)


# ---------------------------------------------------------------------------
# import_payload / import_upload
# ---------------------------------------------------------------------------


class TestImportPayload:
    def test_javascript_export_is_imported(
        self, import_service: AccountImportService, store: FakeAccountStore
    ) -> None:
        raw = b"""
        // accounts exported from the old CRM
        module.exports = [
          { name: 'Acme', status: 'active', email: 'ops@acme.example' },
          { name: 'Globex', status: 'pending' },
        ];
        """

        report = import_service.import_payload(raw=raw, store=store)

        assert report.imported == 2
        assert report.errors == 0
        assert report.accounts[1].status == "pending"

    @pytest.mark.parametrize(
        "raw",
        [
            b'{"name": "Acme"}',
            b"not an array at all",
            b'[{"name": "Acme"}, fetch("http://attacker")]',
            b"[{name: 'A'}].map(x => x)",
        ],
    )
    def test_decode_failure_makes_no_store_calls(
        self, import_service: AccountImportService, store: FakeAccountStore, raw: bytes
    ) -> None:
        with pytest.raises(MalformedPayloadError):
            import_service.import_payload(raw=raw, store=store)

        assert store.create_calls == 0
        assert store.accounts == {}

    def test_candidate_limit(self, store: FakeAccountStore) -> None:
        service = AccountImportService(max_candidates=2)

        with pytest.raises(MalformedPayloadError, match="at most 2"):
            service.import_payload(raw=b'[{"name": "a"}, {"name": "b"}, {"name": "c"}]', store=store)

        assert store.create_calls == 0

    def test_upload_is_read_and_imported(
        self, import_service: AccountImportService, store: FakeAccountStore
    ) -> None:
        upload = UploadFile(file=io.BytesIO(b'[{"name": "Acme"}]'), filename="accounts.json")

        report = import_service.import_upload(upload_file=upload, store=store)

        assert report.imported == 1

    def test_oversized_upload_is_rejected(self, store: FakeAccountStore) -> None:
        service = AccountImportService(max_upload_bytes=16)
        upload = UploadFile(file=io.BytesIO(b'[{"name": "A much longer account name"}]'), filename="a.js")

        with pytest.raises(PayloadTooLargeError):
            service.import_upload(upload_file=upload, store=store)

        assert store.create_calls == 0


# ---------------------------------------------------------------------------
# ImportReportResponse
# ---------------------------------------------------------------------------


def test_report_response_uses_camel_case_and_echoes_candidates(
    import_service: AccountImportService, store: FakeAccountStore
) -> None:
    report = import_service.import_candidates(candidates=SCENARIO, store=store)

    body = ImportReportResponse.from_report(report).model_dump(mode="json", by_alias=True)

    assert body["imported"] == 1
    assert body["errors"] == 2
    assert body["accounts"][0]["name"] == "Acme"
    assert [detail["account"] for detail in body["errorDetails"]] == SCENARIO[1:]
    assert body["errorDetails"][0]["kind"] == "validation"
    assert body["errorDetails"][1]["violations"][0]["field"] == "status"
