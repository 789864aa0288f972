from extensions import db
from models import MediaFile


def test_home_serves_page_and_prepares_history(client, workbook, config):
    resp = client.get("/")
    assert resp.status_code == 200
    assert config.page_title in resp.get_data(as_text=True)
    assert workbook.get_sheet(config.history_sheet_name) is not None


def test_save_audio_endpoint(client):
    resp = client.post("/api/media/audio", json={"dataUrl": "data:audio/mp3;base64,AAAA",
                                                 "baseFileName": "note"})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["fileName"] == "note.mp3"
    assert body["fileUrl"].startswith("https://res.cloudinary.com/test/")


def test_save_video_and_photo_endpoints(client):
    resp = client.post("/api/media/video", json={"dataUrl": "data:video/webm;base64,AAAA",
                                                 "baseFileName": "clip", "extension": "mkv"})
    assert resp.get_json()["fileName"] == "clip.webm"

    resp = client.post("/api/media/photo", json={"dataUrl": "data:image/png;base64,AAAA",
                                                 "baseFileName": "pic", "extension": "jpeg"})
    assert resp.get_json()["fileName"] == "pic.jpeg"


def test_invalid_payload_is_400(client):
    resp = client.post("/api/media/drawing", json={"dataUrl": "data:image/jpeg;base64,AAAA",
                                                   "baseFileName": "art"})
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False,
                               "message": "お絵かきファイルの保存中にエラーが発生しました。"}

    resp = client.post("/api/media/text", json={})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_storage_failure_is_500(client, cloud):
    cloud.fail_folders = True
    resp = client.post("/api/media/text", json={"text": "hello", "baseFileName": "memo"})
    assert resp.status_code == 500
    assert resp.get_json()["message"] == "テキストファイルの保存中にエラーが発生しました。"


def test_mode_settings_endpoint_fails_open_without_sheet(client):
    body = client.get("/api/settings/modes").get_json()
    assert body["audio"] and body["text"]
    assert "not found" in body["error"]


def test_update_settings_then_save_into_subfolder(client):
    resp = client.put("/api/settings", json={"subfolder": "旅行", "modes": {"video": False}})
    assert resp.status_code == 200
    assert resp.get_json()["modes"]["video"] is False

    assert client.get("/api/settings").get_json()["subfolder"] == "旅行"

    body = client.post("/api/media/text", json={"text": "t", "baseFileName": "memo"}).get_json()
    assert "メディア保存フォルダ > 旅行" in body["message"]


def test_update_settings_rejects_unknown_mode(client):
    resp = client.put("/api/settings", json={"modes": {"hologram": True}})
    assert resp.status_code == 400


def test_history_endpoint(client):
    client.post("/api/media/text", json={"text": "t", "baseFileName": "memo"})
    body = client.get("/api/history").get_json()
    assert body["rows"][0]["ファイル名"] == "memo.txt"
    assert body["rows"][0]["メディアタイプ"] == "テキスト"


def test_folder_endpoints(client):
    body = client.post("/api/media/text", json={"text": "t", "baseFileName": "memo"}).get_json()
    media = db.session.get(MediaFile, body["fileId"])

    listing = client.get("/api/folders/list").get_json()
    assert listing[0]["name"] == "メディア保存フォルダ"
    assert listing[0]["count"] == 1

    detail = client.get(f"/api/folders/{media.folder_id}").get_json()
    assert detail["files"][0]["name"] == "memo.txt"
    assert client.get("/api/folders/999").status_code == 404


def test_health(client):
    assert client.get("/health").get_json() == {"status": "healthy"}
