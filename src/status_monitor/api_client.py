import httpx


class StatusAPIClient:
    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.client = httpx.Client(base_url=base_url, timeout=10.0, transport=transport)

    def health(self) -> dict:
        resp = self.client.get("/health")
        resp.raise_for_status()
        return resp.json()

    def send_report(self, **report: object) -> dict:
        resp = self.client.post("/api/status", json=report)
        resp.raise_for_status()
        return resp.json()

    def status(self, device_id: str | None = None) -> dict:
        params = {"device_id": device_id} if device_id else {}
        resp = self.client.get("/api/status", params=params)
        resp.raise_for_status()
        return resp.json()

    def history(self, limit: int = 100, device_id: str | None = None) -> list[dict]:
        params: dict = {"limit": limit}
        if device_id:
            params["device_id"] = device_id
        resp = self.client.get("/api/history", params=params)
        resp.raise_for_status()
        return resp.json()

    def stats(self) -> dict:
        resp = self.client.get("/api/stats")
        resp.raise_for_status()
        return resp.json()

    def list_devices(self) -> list[dict]:
        resp = self.client.get("/api/devices")
        resp.raise_for_status()
        return resp.json()

    def transitions(self, limit: int = 20, device_id: str | None = None) -> list[dict]:
        params: dict = {"limit": limit}
        if device_id:
            params["device_id"] = device_id
        resp = self.client.get("/api/transitions", params=params)
        resp.raise_for_status()
        return resp.json()

    def close(self) -> None:
        self.client.close()
