"""
django-blog-platform - A multi-user blogging platform for Django.

Features:
- User profiles with bio and brand color
- Draft / published post lifecycle
- Ordered tags, at most four per post
- Cover image uploads into folder categories
- JSON API and server-rendered pages
- A post editor workflow usable in-process or over HTTP
"""

__version__ = "0.1.0"
