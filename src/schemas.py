"""
Esquemas de entrada da API.

Os corpos JSON são validados aqui, antes de chegar às regras de domínio;
qualquer falha vira um ValidationError (HTTP 400).
"""
from typing import ClassVar, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from src.errors import ValidationError


class RequestSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    error_message: ClassVar[str] = "Dados inválidos."


class NewEquipmentRequest(RequestSchema):
    error_message: ClassVar[str] = "Os campos 'id', 'location' e 'category' são obrigatórios."

    id: str = Field(min_length=1)
    location: str = Field(min_length=1)
    category: str = Field(min_length=1)


class NewCategoryRequest(RequestSchema):
    error_message: ClassVar[str] = "O nome da categoria é obrigatório."

    name: str = Field(min_length=1)


class ClientPatchRequest(RequestSchema):
    error_message: ClassVar[str] = "Nenhum dado para atualizar."

    floorPlanUrl: Optional[str] = None
    coverImageUrl: Optional[str] = None

    @model_validator(mode="after")
    def check_any_field(self):
        # null explícito conta como campo enviado
        if not self.model_fields_set & {"floorPlanUrl", "coverImageUrl"}:
            raise ValueError("nenhum campo enviado")
        return self

    def partial(self):
        return self.model_dump(include=self.model_fields_set & {"floorPlanUrl", "coverImageUrl"})


class ScheduleRequest(RequestSchema):
    error_message: ClassVar[str] = "Data e hora são obrigatórias."

    date: str = Field(min_length=1)
    time: str = Field(min_length=1)


class ChecklistItem(BaseModel):
    id: str
    label: str
    checked: bool = False


class InspectionRequest(RequestSchema):
    error_message: ClassVar[str] = "Dados da vistoria incompletos."

    equipmentId: str = Field(min_length=1)
    status: str = Field(min_length=1)
    # Lista vazia é aceita; apenas a ausência do campo é rejeitada
    checklistItems: List[ChecklistItem]
    evidencePhoto: Optional[str] = None
    observations: Optional[str] = ""
    generalObservations: Optional[str] = ""
    technicianId: Optional[str] = None


def parse_body(schema, payload):
    """Valida o corpo da requisição contra o esquema informado"""
    if not isinstance(payload, dict):
        raise ValidationError(schema.error_message)
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(schema.error_message) from e
