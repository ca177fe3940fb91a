"""
/**
 * @file jimeng_backend/scripts/update_model_configs.py
 * @description 手动更新模型配置：从厂商接口拉取各站点最新模型并写入本地快照。
 * @usage python -m jimeng_backend.scripts.update_model_configs [--output PATH]
 */
"""

import argparse
import json
import logging
import sys

from jimeng_backend.services.catalog_store import STATUS_OK, CatalogStore
from jimeng_backend.services.errors import CatalogError
from jimeng_backend.services.region_service import SITE_INFO, SITES


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Refresh the local model config snapshot from the vendor API")
    parser.add_argument("--output", default=None, help="snapshot path (defaults to the configured one)")
    parser.add_argument("--json", action="store_true", help="print the raw refresh report")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    store = CatalogStore(snapshot_path=args.output)
    try:
        # 已有快照时，失败站点沿用旧数据写回
        store.initialize()
    except CatalogError as e:
        print(f"Existing snapshot not loaded ({e}), starting from scratch")

    report = store.refresh()
    if args.json:
        sys.stdout.write(json.dumps(report, ensure_ascii=False, indent=2))
        sys.stdout.write("\n")
    else:
        print("========================================")
        for site in SITES:
            detail = report["details"][site]
            print(f"[{SITE_INFO[site].name}]")
            print(f"  image: {detail['image']['status']} - {detail['image']['message']}")
            print(f"  video: {detail['video']['status']} - {detail['video']['message']}")
        print("----------------------------------------")
        print(report["message"])
        if report["persisted"]:
            print(f"Saved to: {store.snapshot_path}")
        elif report["persistError"]:
            print(f"Save failed: {report['persistError']}")
        print("========================================")

    failed = sum(
        1 for site in SITES for kind in ("image", "video") if report["details"][site][kind]["status"] != STATUS_OK
    )
    return 1 if failed == len(SITES) * 2 else 0


if __name__ == "__main__":
    sys.exit(main())
