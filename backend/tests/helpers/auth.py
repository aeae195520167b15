def login(client, email: str, password: str = "pass123") -> None:
    response = client.post("/login", data={"email": email, "password": password}, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/surveys"
