"""
Fixed reference lists for the China -> Algeria lane. Clients build their filters from these.
"""

ORIGIN_CITIES = (
    "Guangzhou",
    "Shenzhen",
    "Shanghai",
    "Yiwu",
    "Beijing",
    "Ningbo",
    "Qingdao",
    "Tianjin",
    "Xiamen",
    "Dalian",
)

DESTINATION_CITIES = (
    "Alger",
    "Oran",
    "Constantine",
    "Annaba",
    "Blida",
    "Batna",
    "Djelfa",
    "Sétif",
    "Sidi Bel Abbès",
    "Biskra",
)

LOADING_PORTS = (
    "Port of Shanghai",
    "Port of Shenzhen",
    "Port of Ningbo-Zhoushan",
    "Port of Guangzhou",
    "Port of Qingdao",
    "Port of Tianjin",
    "Port of Xiamen",
    "Port of Dalian",
)

ARRIVAL_PORTS = (
    "Port of Algiers",
    "Port of Oran",
    "Port of Annaba",
    "Port of Skikda",
    "Port of Bejaia",
    "Port of Mostaganem",
    "Port of Djendjene",
)

VEHICLE_TYPES = (
    "Sedan",
    "SUV",
    "Truck",
    "Van",
    "Pickup",
    "Minibus",
    "Any type",
)


def get_catalog() -> dict[str, list[str]]:
    return {
        "origin_cities": list(ORIGIN_CITIES),
        "destination_cities": list(DESTINATION_CITIES),
        "loading_ports": list(LOADING_PORTS),
        "arrival_ports": list(ARRIVAL_PORTS),
        "vehicle_types": list(VEHICLE_TYPES),
    }
