from flask import Flask

from sampleparquet.modules.auth.routes import bp as auth_bp
from sampleparquet.modules.catalog.routes import bp as catalog_bp
from sampleparquet.modules.content.routes import bp as content_bp
from sampleparquet.modules.submissions.routes import bp as submissions_bp
from sampleparquet.modules.admin.routes import bp as admin_bp


def register_api_blueprints(app: Flask, prefix: str = "") -> None:
    api_prefix = f"{prefix}/api"
    app.register_blueprint(auth_bp, url_prefix=api_prefix)
    app.register_blueprint(catalog_bp, url_prefix=api_prefix)
    app.register_blueprint(content_bp, url_prefix=api_prefix)
    app.register_blueprint(submissions_bp, url_prefix=api_prefix)
    app.register_blueprint(admin_bp, url_prefix=api_prefix)

    # Root API document
    @app.get(api_prefix)
    def api_index():
        return {
            "name": "Sample Parquet API",
            "version": "0.1.0",
            "endpoints": {
                "auth": ["/auth/login", "/auth/logout", "/auth/session"],
                "catalog": ["/categories", "/products", "/products/<slug>"],
                "content": ["/blog", "/blog/<slug>", "/gallery", "/testimonials", "/faq", "/settings"],
                "submissions": ["/quotes", "/contact"],
                "admin": [
                    "/admin/stats",
                    "/admin/products",
                    "/admin/categories",
                    "/admin/quotes",
                    "/admin/contacts",
                    "/admin/settings",
                ],
            },
        }, 200
