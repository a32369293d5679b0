import io

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def image_file(name="avatar.png", content=PNG_BYTES, mimetype="image/png"):
    return {"profilePicture": (io.BytesIO(content), name, mimetype)}


def stored_files(folder):
    if not folder.exists():
        return []
    return sorted(p.name for p in folder.iterdir())
