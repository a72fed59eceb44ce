from blog_editor.app.app import create_app

__all__ = ["create_app"]
