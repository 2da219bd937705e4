"""Command-line client for a running asset catalog server."""

import argparse
import json
import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from catalog.core.config import get_settings

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
REQUEST_TIMEOUT = 30


class AssetApiError(RuntimeError):
    """Raised when the server answers with success=false."""

    def __init__(self, status_code: int, payload: Dict[str, Any]) -> None:
        detail = payload.get("error") or payload.get("message") or "unknown error"
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.payload = payload


def _handle(response: requests.Response) -> Dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        response.raise_for_status()
        raise AssetApiError(response.status_code, {"error": response.text[:200]})
    if response.status_code >= 400 or not payload.get("success", False):
        logger.error("Asset API call failed: status=%s payload=%s", response.status_code, payload)
        raise AssetApiError(response.status_code, payload)
    return payload


def upload_file(base_url: str, company_id: str, path: Path) -> Dict[str, Any]:
    mimetype = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    with path.open("rb") as fh:
        response = _SESSION.post(
            f"{base_url}/assets/upload",
            data={"companyId": company_id},
            files={"assetFile": (path.name, fh, mimetype)},
            timeout=REQUEST_TIMEOUT,
        )
    return _handle(response)


def list_assets(base_url: str, company_id: Optional[str] = None) -> Dict[str, Any]:
    params = {"companyId": company_id} if company_id else None
    response = _SESSION.get(f"{base_url}/assets", params=params, timeout=REQUEST_TIMEOUT)
    return _handle(response)


def delete_asset(base_url: str, company_id: str, latitude: float, longitude: float) -> Dict[str, Any]:
    body = {"companyId": company_id, "latitude": latitude, "longitude": longitude}
    response = _SESSION.delete(f"{base_url}/assets/delete", json=body, timeout=REQUEST_TIMEOUT)
    return _handle(response)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Talk to the asset catalog API")
    parser.add_argument(
        "--url",
        dest="base_url",
        default=get_settings().api_url,
        help="Base URL of the asset catalog server",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    upload = commands.add_parser("upload", help="Upload a CSV or JSON asset file")
    upload.add_argument("--company", dest="company_id", required=True, help="Company identifier")
    upload.add_argument("path", type=Path, help="Path to a .csv or .json file")

    listing = commands.add_parser("list", help="List stored assets")
    listing.add_argument("--company", dest="company_id", help="Case-insensitive company filter")

    delete = commands.add_parser("delete", help="Delete the asset at a coordinate")
    delete.add_argument("--company", dest="company_id", required=True, help="Company identifier")
    delete.add_argument("--lat", dest="latitude", type=float, required=True)
    delete.add_argument("--lng", dest="longitude", type=float, required=True)
    return parser


def main(argv: Optional[list] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)
    base_url = args.base_url.rstrip("/")

    try:
        if args.command == "upload":
            result = upload_file(base_url, args.company_id, args.path)
        elif args.command == "list":
            result = list_assets(base_url, args.company_id)
        else:
            result = delete_asset(base_url, args.company_id, args.latitude, args.longitude)
    except AssetApiError as exc:
        logger.error("%s", exc)
        return 1
    except requests.RequestException as exc:
        logger.error("Failed to reach asset API at %s: %s", base_url, exc)
        return 2

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
