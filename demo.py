"""
secretvars — Live Demo
======================
Walks through the full owner → viewer → query flow.

Run with:
  python demo.py
"""

import sys
import os

# Ensure the package root is on the path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from secretvars.contract import SecretVarsContract, UnauthorizedError


# ── ANSI colours ──────────────────────────────────────────────────────────────
GREEN = "\033[92m"
RED   = "\033[91m"
CYAN  = "\033[96m"
BOLD  = "\033[1m"
DIM   = "\033[2m"
RESET = "\033[0m"


def header(text: str) -> None:
    print(f"\n{BOLD}{CYAN}{text}{RESET}")
    print(f"{DIM}{'─' * 66}{RESET}")


def main():
    contract = SecretVarsContract(config="default")

    header("STEP 1 — creator instantiates the contract")
    contract.instantiate("creator", {"prng_seed": b"prng_seed"})
    print(f"  owner            : {contract.owner()}")

    header("STEP 2 — creator allow-lists viewer1 and stores a secret")
    contract.execute("creator", {"set_viewers": {"viewers": ["viewer1"]}})
    contract.execute("creator", {"set_secret_variables": {"secret_variables": "this is a secret"}})
    print(f"  allowed viewers  : {contract.allowed_viewers()}")

    header("STEP 3 — viewer1 generates a viewing key")
    res = contract.execute("viewer1", {"generate_viewing_key": {"entropy": "entropy"}})
    key = res.data.key
    print(f"  key              : {key[:14]}... ({len(key)} chars)")

    header("STEP 4 — anyone holding the key can query")
    secret = contract.query({"get_secret_variables": {"viewing_key": key, "account": "viewer1"}})
    print(f"  {GREEN}payload          : {secret!r}{RESET}")

    header("STEP 5 — a wrong key is rejected")
    try:
        contract.query({"get_secret_variables": {"viewing_key": "asda", "account": "viewer1"}})
    except UnauthorizedError as exc:
        print(f"  {RED}rejected         : {exc.message}{RESET}")

    header("AUDIT")
    for entry in contract.audit():
        print(f"  {entry['operation']:<22} {entry['principal']:<12} {entry['result']}")
    print()


if __name__ == "__main__":
    main()
