from pydantic import BaseModel, field_validator


class PlanRequest(BaseModel):
    zona: str | None = None
    municipio_preferido: str | None = None
    tamano_perro: str | None = None
    quiere_playa: bool = True
    tipo_viaje: str | None = None
    duracion_dias: int | None = None

    model_config = {"extra": "ignore"}

    @field_validator("zona", "municipio_preferido", "tamano_perro", "tipo_viaje", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("quiere_playa", mode="before")
    @classmethod
    def _null_means_default(cls, v):
        return True if v is None else v

    @property
    def has_locality(self) -> bool:
        return bool(self.zona or self.municipio_preferido)


class CategoryErrorOut(BaseModel):
    message: str
    status: int | None = None


class PlanResponse(BaseModel):
    ok: bool
    requestId: str
    errors: dict[str, CategoryErrorOut]
    zona: str | None = None
    municipio_preferido: str | None = None
    tamano_perro: str | None = None
    duracion_dias: int | None = None
    tipo_viaje: str | None = None
    alojamientos: list[dict]
    restaurantes: list[dict]
    experiencias: list[dict]
    playas: list[dict]
