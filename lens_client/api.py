
import requests

class API:
    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 30.0):
        self.base = base_url.rstrip("/"); self.timeout = timeout
    def evaluate(self, content: str, candidates: list[str], *, document_id: str = "default", base_dir: str | None = None, include_decorations: bool = True):
        body = {"document_id": document_id, "content": content, "candidates": candidates, "base_dir": base_dir, "include_decorations": include_decorations}
        r = requests.post(self.base + "/v1/evaluate", json=body, timeout=self.timeout); r.raise_for_status(); return r.json()
    def get_document(self, document_id: str = "default"):
        r = requests.get(self.base + f"/v1/documents/{document_id}", timeout=self.timeout); r.raise_for_status(); return r.json()
    def config(self):
        r = requests.get(self.base + "/v1/config", timeout=self.timeout); r.raise_for_status(); return r.json()
