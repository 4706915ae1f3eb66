"""Serve the public folder: the generated gallery at / and every asset at /{root folder}/..."""
import functools
import http.server
import sys

from gallery_config import PUBLIC_DIR, SERVE_HOST, SERVE_PORT, INDEX_FILE


def make_server(public_dir=PUBLIC_DIR, host=SERVE_HOST, port=SERVE_PORT):
    handler = functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(public_dir))
    return http.server.ThreadingHTTPServer((host, port), handler)


def main():
    if not (PUBLIC_DIR / INDEX_FILE).exists():
        print(f"{PUBLIC_DIR / INDEX_FILE} not found, run gallery_gen.py first")
        sys.exit(1)
    with make_server() as httpd:
        host, port = httpd.server_address[:2]
        print(f'Assets gallery: http://{host}:{port}/')
        sys.stdout.flush()
        httpd.serve_forever()


if __name__ == '__main__':
    main()
