from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
	"""snake_case in Python, camelCase on the wire"""
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Product(_WireModel):
	"""Goods item described by a document"""
	certificate_document: Optional[str] = None
	certificate_document_date: Optional[date] = None
	certificate_document_number: Optional[str] = None
	owner_inn: Optional[str] = None
	producer_inn: Optional[str] = None
	production_date: Optional[date] = None
	tnved_code: Optional[str] = None
	uit_code: Optional[str] = None
	uitu_code: Optional[str] = None


class Document(_WireModel):
	"""Goods introduction document sent to the create endpoint"""
	description: Optional[str] = None
	doc_id: Optional[str] = None
	doc_status: Optional[str] = None
	doc_type: str = "LP_INTRODUCE_GOODS"
	import_request: bool = False
	owner_inn: Optional[str] = None
	participant_inn: Optional[str] = None
	producer_inn: Optional[str] = None
	production_date: Optional[date] = None
	production_type: Optional[str] = None
	products: list[Product] = Field(default_factory=list)
	reg_date: Optional[date] = None
	reg_number: Optional[str] = None

	def to_payload(self) -> dict[str, Any]:
		return self.model_dump(mode="json", by_alias=True)
