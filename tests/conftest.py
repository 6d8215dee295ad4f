from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from stockrecon.api.deps import catalog_factory_dependency, settings_dependency
from stockrecon.api.main import app
from stockrecon.catalog.kiotviet import CatalogCredentials, KiotVietCatalog
from stockrecon.config import Settings


class FakeKiotViet:
    """In-memory stand-in for the KiotViet token, products and branches endpoints."""

    def __init__(self) -> None:
        self.products: list[dict[str, object]] = []
        self.branches: list[dict[str, object]] = [
            {"id": 11, "branchName": "SM BEE"},
            {"id": 12, "branchName": "SM-PLAZA Quận 1"},
        ]
        self.token_status = 200
        self.token_body: object = {"access_token": "token-123", "expires_in": 86400}
        self.branches_status = 200
        self.branches_body: object | None = None
        self.batch_body: object | None = None
        self.failing_codes: set[str] = set()
        self.timeout_codes: set[str] = set()
        self.failing_stock_offsets: set[int] = set()
        self.requests: list[httpx.Request] = []

    def add_product(self, code: str, category_id: object, base_price: object, bar_code: str | None = None, **extra: object) -> None:
        product: dict[str, object] = {"code": code, "categoryId": category_id, "basePrice": base_price}
        if bar_code is not None:
            product["barCode"] = bar_code
        product.update(extra)
        self.products.append(product)

    @property
    def code_queries(self) -> list[list[str]]:
        return [
            request.url.params["code"].split(",")
            for request in self.requests
            if request.url.path == "/products" and "code" in request.url.params
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/connect/token":
            return httpx.Response(self.token_status, json=self.token_body)
        if path == "/branches":
            if self.branches_status != 200:
                return httpx.Response(self.branches_status, text="boom")
            if self.branches_body is not None:
                return httpx.Response(200, json=self.branches_body)
            return httpx.Response(200, json={"data": self.branches, "total": len(self.branches)})
        if path == "/products" and "code" in request.url.params:
            codes = request.url.params["code"].split(",")
            if self.timeout_codes & set(codes):
                raise httpx.ReadTimeout("timed out", request=request)
            if self.failing_codes & set(codes):
                return httpx.Response(500, text="internal error")
            if self.batch_body is not None:
                return httpx.Response(200, json=self.batch_body)
            found = [p for p in self.products if p.get("code") in codes or p.get("barCode") in codes]
            return httpx.Response(200, json={"data": found, "total": len(found)})
        if path == "/products":
            offset = int(request.url.params.get("currentItem", "0"))
            size = int(request.url.params.get("pageSize", "100"))
            if offset in self.failing_stock_offsets:
                return httpx.Response(503, text="unavailable")
            page = self.products[offset : offset + size]
            return httpx.Response(200, json={"data": page, "total": len(self.products)})
        return httpx.Response(404, text=json.dumps({"path": path}))


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        kiotviet_retailer="demo-retailer",
        kiotviet_client_id="client-id",
        kiotviet_client_secret="client-secret",
    )


@pytest.fixture()
def kiotviet() -> FakeKiotViet:
    return FakeKiotViet()


@pytest.fixture()
def catalog_factory(kiotviet: FakeKiotViet):
    def _factory(credentials: CatalogCredentials, settings: Settings) -> KiotVietCatalog:
        client = httpx.Client(transport=httpx.MockTransport(kiotviet.handler))
        return KiotVietCatalog(credentials, settings, client=client)

    return _factory


@pytest.fixture()
def catalog(settings: Settings, catalog_factory) -> KiotVietCatalog:
    return catalog_factory(CatalogCredentials.from_settings(settings), settings)


@pytest.fixture()
def client(settings: Settings, catalog_factory) -> TestClient:
    app.dependency_overrides[settings_dependency] = lambda: settings
    app.dependency_overrides[catalog_factory_dependency] = lambda: catalog_factory
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
