#!/usr/bin/env python3
"""
Cadastrar um novo envio diretamente no arquivo JSON configurado (DATA_FILE).

Uso:
  python scripts/add_shipment.py --tracking-no ABC123 --sender "Loja X" --receiver "Maria" \
      [--id s_custom] [--field status=in_transit --field weight=2.5]
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Garante que o pacote shiptrack seja importável ao rodar da raiz do repo
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shiptrack.core.config import get_settings  # noqa: E402
from shiptrack.core.errors import ValidationError  # noqa: E402
from shiptrack.repositories.json_storage import ShipmentStore  # noqa: E402
from shiptrack.services.shipment_service import ShipmentService  # noqa: E402


def parse_field(raw: str) -> tuple[str, object]:
    """``key=value``; the value is read as JSON when possible, else kept as text."""
    key, sep, value = raw.partition("=")
    key = key.strip()
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"campo invalido: {raw!r} (use chave=valor)")
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Cadastrar envio no arquivo de dados")
    ap.add_argument("--tracking-no", required=True, help="Codigo de rastreio (ex.: ABC123)")
    ap.add_argument("--sender", required=True, help="Remetente")
    ap.add_argument("--receiver", required=True, help="Destinatario")
    ap.add_argument("--id", help="ID opcional (default: gerado)")
    ap.add_argument("--field", action="append", type=parse_field, default=[], help="Campo extra chave=valor")
    ap.add_argument("--data-file", help="Arquivo de dados (default: DATA_FILE)")
    args = ap.parse_args(argv)

    data_file = args.data_file or get_settings().data_file
    svc = ShipmentService(ShipmentStore(data_file))

    candidate: dict[str, object] = {
        "trackingNo": args.tracking_no.strip(),
        "sender": args.sender.strip(),
        "receiver": args.receiver.strip(),
    }
    if args.id:
        candidate["id"] = args.id.strip()
    for key, value in args.field:
        candidate[key] = value

    try:
        record = svc.create(candidate)
    except ValidationError as exc:
        sys.stderr.write(f"Erro: {exc.message}\n")
        return 2
    print("OK: envio cadastrado")
    print(f"  ID: {record['id']}")
    print(f"  Rastreio: {record['trackingNo']}")
    print(f"  Arquivo: {data_file}")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception as exc:  # pragma: no cover - uso CLI
        sys.stderr.write(f"Erro: {exc}\n")
        raise SystemExit(1)
