from noticias import crud, models

API = "/api/public-content"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected"}
    assert response.headers["X-Request-ID"]


def test_categories(client, make_category):
    make_category("politica", "Política", color="#FF0000")

    response = client.get(f"{API}/categories")

    assert response.status_code == 200
    payload = response.json()
    assert payload[0]["slug"] == "politica"
    assert payload[0]["count"] == 0


def test_category_listing_and_not_found(client, make_category, make_article):
    deportes = make_category("deportes", "Deportes")
    make_article(title="Tuzos", category_id=deportes.id)

    response = client.get(f"{API}/categoria/deportes", params={"limit": 5})
    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 1
    assert payload["limit"] == 5
    assert payload["total_pages"] == 1
    assert payload["data"][0]["title"] == "Tuzos"

    missing = client.get(f"{API}/categoria/nonexistent-slug")
    assert missing.status_code == 404
    assert "nonexistent-slug" in missing.json()["detail"]


def test_listing_validates_pagination(client):
    assert client.get(f"{API}/tag/obras", params={"limit": 0}).status_code == 422
    assert client.get(f"{API}/autor/ana", params={"page": 0}).status_code == 422


def test_tag_and_author_listings(client, make_article):
    make_article(title="Obra pública", tags=["Obras Públicas"], author="Ana Ruiz")

    assert client.get(f"{API}/tag/obras-públicas").json()["data"][0]["title"] == "Obra pública"
    assert client.get(f"{API}/autor/ana-ruiz").json()["total"] == 1
    assert client.get(f"{API}/autor/otra-persona").status_code == 404


def test_search(client, make_article):
    make_article(title="Feria de Pachuca")

    response = client.get(f"{API}/busqueda/feria", params={"sortBy": "date"})
    assert response.status_code == 200
    assert response.json()["data"][0]["title"] == "Feria de Pachuca"

    assert client.get(f"{API}/busqueda/feria", params={"sortBy": "views"}).status_code == 422


def test_subscription_flow(client, db, mailer):
    response = client.post(f"{API}/suscribir-boletin", json={"email": "lector@example.com", "manana": True})
    assert response.status_code == 200
    assert response.json()["is_confirmed"] is False
    assert len(mailer.sent) == 1

    subscriber = crud.get_subscriber_by_email(db, "lector@example.com")
    assert subscriber.morning is True
    token = subscriber.confirmation_token

    confirmed = client.get(f"{API}/confirmar-suscripcion", params={"token": token})
    assert confirmed.status_code == 200
    assert confirmed.json()["is_confirmed"] is True

    again = client.get(f"{API}/confirmar-suscripcion", params={"token": token})
    assert again.status_code == 400
    assert again.json() == {"detail": "Token inválido o expirado"}

    updated = client.put(f"{API}/preferencias", params={"token": subscriber.unsubscribe_token},
                         json={"semanal": True})
    assert updated.status_code == 200
    assert updated.json()["morning"] is True
    assert updated.json()["weekly"] is True

    gone = client.get(f"{API}/desuscribir", params={"token": subscriber.unsubscribe_token, "reason": "vacaciones"})
    assert gone.status_code == 200
    db.refresh(subscriber)
    assert subscriber.is_active is False


def test_subscription_errors(client, mailer):
    assert client.post(f"{API}/suscribir-boletin", json={"email": "no-es-email"}).status_code == 422
    assert client.get(f"{API}/desuscribir", params={"token": "nope"}).status_code == 404
    assert client.put(f"{API}/preferencias", params={"token": "nope"}, json={"weekly": True}).status_code == 404

    mailer.fail_all = True
    response = client.post(f"{API}/suscribir-boletin", json={"email": "lector@example.com"})
    assert response.status_code == 502


def test_bulletin_preview(client, make_article):
    make_article(title="Hoy en Pachuca")

    morning = client.get(f"{API}/boletin/manana")
    assert morning.status_code == 200
    assert morning.json()["type"] == "morning"
    assert morning.json()["articles"][0]["title"] == "Hoy en Pachuca"

    sports = client.get(f"{API}/boletin/deportes")
    assert sports.json() == {"message": "No hay noticias de deportes disponibles"}

    assert client.get(f"{API}/boletin/mensual").status_code == 400


def test_contact(client, db, mailer):
    form = {
        "name": "Lucía",
        "email": "lucia@example.com",
        "subject": "Bache",
        "message": "Hay un bache enorme frente al mercado.",
    }

    response = client.post(f"{API}/contacto", json=form, headers={"x-site-domain": "noticiaspachuca.com"})
    assert response.status_code == 200
    message = db.get(models.ContactMessage, int(response.json()["id"]))
    assert message.site_domain == "noticiaspachuca.com"
    assert message.user_agent == "testclient"
    assert len(mailer.sent) == 2

    assert client.post(f"{API}/contacto", json={**form, "message": "corto"}).status_code == 422

    mailer.fail_all = True
    assert client.post(f"{API}/contacto", json=form).status_code == 502
