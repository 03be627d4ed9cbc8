import argparse
import json
from sitehealth.core.config import Config
from sitehealth.core.engine import Engine
from sitehealth.reporters.console import Log


def main(argv=None):
    p = argparse.ArgumentParser(description="Website security and SEO health checks")
    p.add_argument("probe_set", choices=["security", "seo"],
                   help="Probe set to run")
    p.add_argument("url", help="Target URL (https:// is assumed if missing)")
    p.add_argument("--timeout", type=float,
                   help="Per-request timeout in seconds (default from config)")
    p.add_argument("--no-verify", action="store_true",
                   help="Do not verify TLS certificates on HTTP probes")
    p.add_argument("--indent", type=int, default=2, help="JSON indentation")
    p.add_argument("-v", "--verbose", action="count", default=1,
                   help="-v, -vv")
    p.add_argument("-q", "--quiet", action="store_true", help="Only print the report")
    args = p.parse_args(argv)

    config = Config.from_env().override(
        timeout=args.timeout,
        verify_tls=False if args.no_verify else None,
    )
    log = Log(verbose=0 if args.quiet else args.verbose)
    engine = Engine(config, logger=log)

    if args.probe_set == "security":
        result = engine.run_security(args.url)
    else:
        result = engine.run_seo(args.url)
    print(json.dumps(result, indent=args.indent, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
