"""Command-line interface: run the API server or manage posts through the sync client."""

import argparse
import sys

from . import __version__
from .config import get_settings
from .localization import SUPPORTED_LANGUAGES, resolve_localized
from .sync import ImageFile, LocalCache, PostForm, PostsError, PostsSync, SyncContext, ValidationError


def build_client(args) -> PostsSync:
    settings = get_settings()
    return PostsSync(
        base_url=args.api_url or settings.api_base_url,
        cache=LocalCache(args.cache or settings.local_cache_path),
        timeout=settings.http_timeout,
        lang=args.lang,
    )


def _add_form_arguments(parser, image_required: bool):
    parser.add_argument("--title-en", default="", help="English title")
    parser.add_argument("--title-uk", default="", help="Ukrainian title")
    parser.add_argument("--description-en", default="", help="English description")
    parser.add_argument("--description-uk", default="", help="Ukrainian description")
    parser.add_argument(
        "--image",
        help="Path to the image file" + ("" if image_required else " (keeps the current image if omitted)"),
    )


def _form_from_args(args) -> PostForm:
    return PostForm(
        title_en=args.title_en,
        title_uk=args.title_uk,
        description_en=args.description_en,
        description_uk=args.description_uk,
        image=ImageFile.from_path(args.image) if args.image else None,
    )


def cmd_serve(args):
    import uvicorn

    uvicorn.run("metalframe.main:app", host=args.host, port=args.port, reload=args.reload)


def cmd_list(args, client: PostsSync, ctx: SyncContext):
    posts = client.fetch_posts(ctx)
    print(f"Mode: {ctx.mode.value}")
    if not posts:
        print("No posts yet.")
        return
    for post in posts:
        created = post.created_at.isoformat() if post.created_at else "-"
        print(f"  [{post.id}] {resolve_localized(post.title, args.lang)}  ({created})")


def cmd_create(args, client: PostsSync, ctx: SyncContext):
    client.fetch_posts(ctx)
    result = client.submit_post(ctx, _form_from_args(args))
    print(f"{result.message} id={result.post.id}")


def cmd_update(args, client: PostsSync, ctx: SyncContext):
    posts = client.fetch_posts(ctx)
    current = next((p for p in posts if p.id == args.id), None)
    form = _form_from_args(args)
    if current is not None:
        # Unspecified fields keep their stored text
        stored = PostForm.from_post(current)
        for name in ("title_en", "title_uk", "description_en", "description_uk"):
            if not getattr(form, name):
                setattr(form, name, getattr(stored, name))
    result = client.submit_post(ctx, form, existing_id=args.id)
    print(f"{result.message} id={result.post.id}")


def cmd_delete(args, client: PostsSync, ctx: SyncContext):
    client.fetch_posts(ctx)
    posts = client.delete_post(ctx, args.id)
    print(f"Deleted {args.id}. {len(posts)} post(s) remain.")


def cmd_import(args, client: PostsSync, ctx: SyncContext):
    imported = client.import_posts()
    print(f"Imported {imported} post(s).")


COMMANDS = {
    "list": cmd_list,
    "create": cmd_create,
    "update": cmd_update,
    "delete": cmd_delete,
    "import": cmd_import,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metalframe",
        description="MetalFrame Studio posts: API server and admin client.",
    )
    parser.add_argument("-V", "--version", action="version", version=f"metalframe {__version__}")
    parser.add_argument("--api-url", help="API base URL (default: API_BASE_URL setting)")
    parser.add_argument("--cache", help="Local cache file (default: LOCAL_CACHE_PATH setting)")
    parser.add_argument("--lang", choices=SUPPORTED_LANGUAGES, default="en", help="Display language")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    p_serve = sub.add_parser("serve", help="Run the API server")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=3000)
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    sub.add_parser("list", help="List posts")

    p_create = sub.add_parser("create", help="Create a post")
    _add_form_arguments(p_create, image_required=True)

    p_update = sub.add_parser("update", help="Update a post")
    p_update.add_argument("id", help="Post id")
    _add_form_arguments(p_update, image_required=False)

    p_delete = sub.add_parser("delete", help="Delete a post")
    p_delete.add_argument("id", help="Post id")

    sub.add_parser("import", help="Copy every locally cached post to the server")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "serve":
        cmd_serve(args)
        return 0

    client = build_client(args)
    ctx = SyncContext()
    try:
        COMMANDS[args.command](args, client, ctx)
    except ValidationError as e:
        print(f"{e.field}: {e.message}", file=sys.stderr)
        return 2
    except PostsError as e:
        print(e.message, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
