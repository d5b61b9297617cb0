"""
request_checker — Hello World

Every field gets its own chain. Chains share one error list per request,
stop at their first failure, and write sanitized values back into the
request so handlers read clean data.
"""

import asyncio
import tempfile
from pathlib import Path

from request_checker import RequestContext

# ─── Your handler (anything — it only reads the checked request) ───


def create_account(ctx: RequestContext) -> dict:
    return {
        "email": ctx.body["email"],
        "age": ctx.body["age"],
        "newsletter": ctx.body["newsletter"],
        "avatar": ctx.files["avatar"].new_path,
    }


def report(ctx: RequestContext) -> None:
    for error in ctx.error_report().errors:
        print(f"  [INVALID] field={error.field}  message={error.message}")


async def main():
    workdir = Path(tempfile.mkdtemp())
    upload = workdir / "tmp" / "upload_7f3a.png"
    upload.parent.mkdir()
    upload.write_bytes(b"\x89PNG" + b"\x00" * 2048)

    # ──────────────────────────────────────
    #  1. Valid request
    # ──────────────────────────────────────
    print("=== Valid request ===\n")

    ctx = RequestContext(
        query={"page": "2"},
        body={
            "email": "  Alice@Acme.com ",
            "age": "34",
            "newsletter": "true",
            "tags": ["python", "web"],
        },
        files={
            "avatar": {
                "path": str(upload),
                "name": "me.png",
                "type": "image/png",
                "size": upload.stat().st_size,
            }
        },
    )

    ctx.check_query("page").optional().to_int().ge(1)
    ctx.check_query("sort").default("newest")
    ctx.check_body("email").trim().is_email().to_lowercase()
    ctx.check_body("age").to_int().ge(18).le(130)
    ctx.check_body("newsletter").optional().to_boolean()
    ctx.check_body("$.tags[0]", computed=True).first().is_length(2, 20)

    avatar = ctx.check_file("avatar").is_image_content_type().size(1, 1024 * 1024)
    await avatar.move(str(workdir / "avatars") + "/")

    if ctx.has_errors():
        report(ctx)
    else:
        print(f"  Query:   {ctx.query}")
        print(f"  Account: {create_account(ctx)}")

    # ──────────────────────────────────────
    #  2. Invalid request — one error per
    #     failing field, first failure wins
    # ──────────────────────────────────────
    print("\n=== Invalid request ===\n")

    bad = workdir / "tmp" / "upload_91c0.exe"
    bad.write_bytes(b"MZ")

    ctx2 = RequestContext(
        body={"email": "not-an-email", "age": "twelve"},
        files={"avatar": {"path": str(bad), "name": "virus.exe", "type": "application/octet-stream", "size": 2}},
    )

    ctx2.check_body("email").trim().is_email().to_lowercase()
    ctx2.check_body("age").to_int().ge(18)
    ctx2.check_body("newsletter").exist()
    ctx2.check_file("avatar").is_image_content_type()

    report(ctx2)
    await asyncio.sleep(0.1)  # discards run in the background
    print(f"  Rejected upload removed: {not bad.exists()}")

    # ──────────────────────────────────────
    #  3. No body at all
    # ──────────────────────────────────────
    print("\n=== No body ===\n")

    ctx3 = RequestContext(query={"q": "x"})
    ctx3.check_body("email").not_empty().is_email().trim()
    report(ctx3)


if __name__ == "__main__":
    asyncio.run(main())
