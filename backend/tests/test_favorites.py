from conftest import create_campaign


class TestFavorites:
    def test_add_list_remove(self, client, business, creator):
        c = create_campaign(client, business)
        h = creator["headers"]
        assert client.post(f"/api/campaigns/{c['id']}/favorite", headers=h).status_code == 200
        assert client.post(f"/api/campaigns/{c['id']}/favorite", headers=h).status_code == 200
        assert [f["id"] for f in client.get("/api/me/favorites", headers=h).get_json()] == [c["id"]]

        client.delete(f"/api/campaigns/{c['id']}/favorite", headers=h)
        assert client.get("/api/me/favorites", headers=h).get_json() == []

    def test_unknown_campaign(self, client, creator):
        assert client.post("/api/campaigns/404/favorite", headers=creator["headers"]).status_code == 404

    def test_requires_login(self, client):
        assert client.get("/api/me/favorites").status_code == 401
