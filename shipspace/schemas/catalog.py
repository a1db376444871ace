from pydantic import BaseModel


class CatalogOut(BaseModel):
    origin_cities: list[str]
    destination_cities: list[str]
    loading_ports: list[str]
    arrival_ports: list[str]
    vehicle_types: list[str]
