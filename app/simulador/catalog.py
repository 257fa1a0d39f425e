"""
Static reference data used to populate selection lists.
"""
from typing import List

from app.simulador.schemas import CatalogItem

FINANCIAL_ENTITIES: List[CatalogItem] = [
    CatalogItem(value="bcp", label="Banco de Crédito del Perú"),
    CatalogItem(value="bbva", label="BBVA Continental"),
    CatalogItem(value="interbank", label="Interbank"),
    CatalogItem(value="scotiabank", label="Scotiabank"),
    CatalogItem(value="banbif", label="BanBif"),
    CatalogItem(value="pichincha", label="Banco Pichincha"),
    CatalogItem(value="mibanco", label="Mibanco"),
    CatalogItem(value="cajaArequipa", label="Caja Arequipa"),
    CatalogItem(value="cajaHuancayo", label="Caja Huancayo"),
    CatalogItem(value="cajaPiura", label="Caja Piura"),
]

HOUSING_PROGRAMS: List[CatalogItem] = [
    CatalogItem(value="techoPropio", label="Techo Propio"),
    CatalogItem(value="miVivienda", label="Nuevo Crédito MiVivienda"),
    CatalogItem(value="miViviendaVerde", label="MiVivienda Verde"),
    CatalogItem(value="convencional", label="Crédito Hipotecario Convencional"),
]


def list_financial_entities() -> List[CatalogItem]:
    return list(FINANCIAL_ENTITIES)


def list_housing_programs() -> List[CatalogItem]:
    return list(HOUSING_PROGRAMS)
