class TestChainsAPI:
    async def test_list(self, client):
        res = await client.get("/api/chains")
        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 3
        assert [c["id"] for c in data["chains"]] == [1, 10, 100]

    async def test_get(self, client):
        res = await client.get("/api/chains/1")
        assert res.status_code == 200
        data = res.json()
        assert data["slug"] == "ethereum"
        assert data["native_currency"]["symbol"] == "ETH"
        assert data["rpc_urls"] == ["https://eth-primary.test", "https://eth-backup.test"]
        assert data["block_explorer"]["url"] == "https://etherscan.io"

    async def test_unknown_chain_is_404(self, client):
        res = await client.get("/api/chains/999")
        assert res.status_code == 404
        assert "999" in res.json()["detail"]


class TestHealth:
    async def test_health(self, client):
        res = await client.get("/api/health")
        assert res.status_code == 200
        assert res.json()["status"] == "ok"
