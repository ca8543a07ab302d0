"""공통 Pydantic 스키마 및 응답 봉투(envelope) 정의.

Common Pydantic schema definitions.
All API models share CamelModel so that JSON keys are camelCase on the
wire while Python code keeps snake_case attributes. Every response is
wrapped in the {success, message?, data?} envelope built by ok().
"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase 별칭 베이스 모델.

    Base model with camelCase aliases. Accepts both alias and field name
    on input and reads attributes from ORM instances.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ListData(CamelModel):
    """목록 응답 데이터 — items + pagination.

    List payload embedded in the envelope's data field.

    Attributes:
        items: 현재 페이지 항목 (Items for the current page)
        pagination: 페이지네이션 메타데이터 (Pagination metadata)
    """

    items: list[Any]
    pagination: Any


def ok(data: Any = None, message: str | None = None) -> dict[str, Any]:
    """성공 응답 봉투를 생성합니다.

    Build a success envelope. Pydantic models inside data are encoded by
    alias, so nested keys come out camelCase.

    Args:
        data: 응답 데이터 (Response payload, omitted when None)
        message: 사용자 메시지 (Optional human-readable message)

    Returns:
        dict[str, Any]: {"success": True, "message"?: str, "data"?: Any}
    """
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = jsonable_encoder(data, by_alias=True)
    return body


def fail(message: str, details: Any = None) -> dict[str, Any]:
    """실패 응답 봉투 — Build an error envelope."""
    body: dict[str, Any] = {"success": False, "message": message}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return body
