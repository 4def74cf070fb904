from __future__ import annotations

from datetime import date

from crpt_api.infra.schemas import Document, Product


def test_document_payload_uses_camel_case_keys():
    doc = Document(doc_id="d1", import_request=True, owner_inn="7700000000")
    payload = doc.to_payload()

    assert payload["docId"] == "d1"
    assert payload["importRequest"] is True
    assert payload["ownerInn"] == "7700000000"
    assert payload["docType"] == "LP_INTRODUCE_GOODS"
    assert "doc_id" not in payload


def test_document_payload_keeps_nulls_and_serializes_dates():
    doc = Document(production_date=date(2020, 1, 23), products=[Product(uit_code="u1", production_date="2020-01-24")])
    payload = doc.to_payload()

    assert payload["productionDate"] == "2020-01-23"
    assert payload["regDate"] is None
    assert payload["products"] == [
        {
            "certificateDocument": None,
            "certificateDocumentDate": None,
            "certificateDocumentNumber": None,
            "ownerInn": None,
            "producerInn": None,
            "productionDate": "2020-01-24",
            "tnvedCode": None,
            "uitCode": "u1",
            "uituCode": None,
        }
    ]


def test_document_parses_wire_format():
    doc = Document.model_validate_json(
        '{"docId": "d2", "docType": "LP_INTRODUCE_GOODS", "regDate": "2021-05-06",'
        ' "products": [{"tnvedCode": "6401"}]}'
    )

    assert doc.doc_id == "d2"
    assert doc.reg_date == date(2021, 5, 6)
    assert doc.products[0].tnved_code == "6401"
    assert doc.import_request is False
