
from pathlib import Path
import argparse, json, logging, sys, time

import blake3

from ignore_lens.config import settings
from ignore_lens.engine.classifier import split_lines
from ignore_lens.models.schemas import EvaluateRequest, EvaluateResponse
from ignore_lens.services.cache import EvaluationCache
from ignore_lens.services.evaluation import EvaluationService
from ignore_lens.services.generation import GenerationTracker, ResultStore
from ignore_lens.services.metrics import StatsTracker
from ignore_lens.utils.logging import configure_logging
from .api import API
from .watcher import DebouncedTrigger, start_watching
from .workspace_scanner import ignore_file_base_dir, scan_workspace

logger = logging.getLogger(__name__)

def read_snapshot(ignore_file: Path, root: Path) -> tuple[str, list[str], str | None]:
    content = ignore_file.read_text(encoding="utf-8", errors="replace")
    return content, scan_workspace(root), ignore_file_base_dir(root, ignore_file)

def fingerprint(content: str, candidates: list[str], base_dir: str | None) -> str:
    h = blake3.blake3(content.encode("utf-8"))
    h.update((base_dir or "").encode("utf-8") + b"\0")
    for path in sorted(candidates): h.update(path.encode("utf-8") + b"\n")
    return h.hexdigest()

def local_service() -> EvaluationService:
    return EvaluationService(settings, cache=EvaluationCache(settings.result_cache_ttl_s, settings.result_cache_size),
                             results=ResultStore[EvaluateResponse](), stats=StatsTracker())

def evaluate_snapshot(content: str, candidates: list[str], base_dir: str | None, *, document_id: str,
                      api: API | None = None, service: EvaluationService | None = None) -> dict:
    if api is not None:
        return api.evaluate(content, candidates, document_id=document_id, base_dir=base_dir)
    service = service or local_service()
    req = EvaluateRequest(document_id=document_id, content=content, candidates=candidates, base_dir=base_dir)
    return service.evaluate(req).model_dump(mode="json")

def render(content: str, response: dict) -> list[str]:
    lines = split_lines(content)
    decorations = {d["line_index"]: d for d in response.get("decorations", [])}
    width = min(max((len(l) for l in lines), default=0), 60)
    out = []
    for idx, text in enumerate(lines):
        d = decorations.get(idx)
        marker = "*" if d and d["highlight"] else " "
        label = (d or {}).get("label") or ""
        out.append(f"{idx + 1:>4} {marker} {text:<{width}}  {label}".rstrip())
    s = response["summary"]
    out.append(f"{s['total_ignored']} ignored, {s['total_shadowed']} shadowed, {s['total_blocked']} blocked, "
               f"{len(s['no_match_lines'])} without matches")
    return out

def emit(content: str, response: dict, as_json: bool):
    if as_json: print(json.dumps(response, ensure_ascii=False, indent=2))
    else: print("\n".join(render(content, response)))

def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Show what each line of an ignore file does to the workspace.")
    p.add_argument("ignore_file"); p.add_argument("--root", default=None, help="workspace root (default: ignore file directory)")
    p.add_argument("--server", default=None, help="evaluate through a running ignore-lens server")
    p.add_argument("--document-id", default=None)
    p.add_argument("--json", action="store_true")
    p.add_argument("--watch", action="store_true")
    p.add_argument("--debounce-ms", type=int, default=settings.scan_debounce_ms)
    args = p.parse_args(argv)
    configure_logging(settings.log_level)

    ignore_file = Path(args.ignore_file).resolve()
    if not ignore_file.is_file():
        print(f"ignore file not found: {ignore_file}", file=sys.stderr); return 2
    root = Path(args.root).resolve() if args.root else ignore_file.parent
    document_id = args.document_id or ignore_file.as_posix()
    api = API(args.server) if args.server else None
    service = None if api else local_service()

    content, candidates, base_dir = read_snapshot(ignore_file, root)
    emit(content, evaluate_snapshot(content, candidates, base_dir, document_id=document_id, api=api, service=service), args.json)
    if not args.watch:
        return 0

    generations = GenerationTracker(); last = [fingerprint(content, candidates, base_dir)]
    def refresh(reason: str):
        token = generations.begin(document_id)
        content, candidates, base_dir = read_snapshot(ignore_file, root)
        digest = fingerprint(content, candidates, base_dir)
        if digest == last[0]:
            logger.debug("Snapshot unchanged after %s", reason); return
        response = evaluate_snapshot(content, candidates, base_dir, document_id=document_id, api=api, service=service)
        if not generations.is_current(document_id, token):
            logger.debug("Dropping stale evaluation %s", token); return
        last[0] = digest
        print(f"\n--- re-evaluated ({reason})"); emit(content, response, args.json)

    trigger = DebouncedTrigger(refresh, args.debounce_ms / 1000.0)
    observer = start_watching(root, trigger)
    try:
        while True: time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        trigger.cancel(); observer.stop(); observer.join()
    return 0

if __name__ == "__main__":
    sys.exit(main())
