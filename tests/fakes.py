"""In-memory source host and CSV payloads for tests."""

import asyncio

import httpx

from civicstats.config.settings import SourcesConfig

BASE_URL = "http://data.test"

VEHICLE_CSV = """State,District,Vehicle Class,Fuel,Year,Month,Value
Maharashtra,Mumbai,Car,Petrol,2023,1,15000
Maharashtra,Pune,Car,Diesel,2023,13,8000
Delhi,New Delhi,Car,CNG,2023,2,
Karnataka,Bangalore,Bus,Diesel,2023,2,800
"""

OUTBREAK_CSV = """state,district,disease_illness_name,outbreak_starting_date,reporting_date,cases,deaths,status
Maharashtra,Mumbai,Dengue,2023-01-15,2023-01-20,150,2,Active
Delhi,New Delhi,Malaria,2023-02-10,2023-02-05,89,1,Controlled
Kerala,Kochi,Cholera,2023-03-01,2023-03-04,-5,abc,Active
"""

POPULATION_CSV = """state,district,gender,year,value
Maharashtra,Mumbai,Male,2023,6200000
Maharashtra,Mumbai,Female,2023,5800000
Delhi,New Delhi,Male,1850,100
"""

AIR_QUALITY_CSV = """state,area,date,aqi_value,air_quality_status,prominent_pollutants,number_of_monitoring_stations
Maharashtra,Mumbai Central,2023-01-15,156,Moderate,"PM2.5, NO2",5
Delhi,Connaught Place,2023-01-15,289,Poor,"PM2.5, PM10",8
Delhi,Anand Vihar,2023-01-16,1200,Severe,PM10,3
"""

SOURCES = SourcesConfig(base_url=BASE_URL)

SOURCE_FILES: dict[str, str] = {
    SOURCES.vehicle: VEHICLE_CSV,
    SOURCES.outbreak: OUTBREAK_CSV,
    SOURCES.population: POPULATION_CSV,
    SOURCES.air_quality: AIR_QUALITY_CSV,
}


class FakeHost:
    """In-memory static file host served through httpx.MockTransport.

    Records every requested path. Paths listed in ``statuses`` always
    answer with that status; paths in ``delays`` answer after sleeping.
    """

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files = dict(SOURCE_FILES if files is None else files)
        self.statuses: dict[str, int] = {}
        self.delays: dict[str, float] = {}
        self.requests: list[str] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append(path)
        # Content is captured at request time
        text = self.files.get(path)
        if path in self.delays:
            await asyncio.sleep(self.delays[path])
        if path in self.statuses:
            return httpx.Response(self.statuses[path])
        if text is None:
            return httpx.Response(404)
        return httpx.Response(200, text=text)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(self.handler), base_url=BASE_URL
        )

    def count(self, path: str) -> int:
        return self.requests.count(path)
