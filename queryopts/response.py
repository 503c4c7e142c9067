""" Standard shapes for list responses """

from typing import Any, Iterable

from flask import jsonify

from .options import DEFAULT_PAGE_SIZE


def total_pages(total: int, page_size: int) -> int:
    """ The number of pages it takes to show `total` items, `page_size` per page """
    if page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    return -(-total // page_size)  # ceil() for integers


def pagination_meta(total: int, page: int, page_size: int) -> dict:
    """ Pagination metadata for a list response """
    return {
        'total': total,
        'page': page,
        'page_size': page_size,
        'total_pages': total_pages(total, page_size),
    }


def paginated_response(data: Iterable[Any], total: int, page: int, page_size: int) -> dict:
    """ A paginated response: data, and pagination metadata

        Example:

            return jsonify(paginated_response(users, total, opts.page, opts.page_size))
    """
    return {
        'data': list(data),
        **pagination_meta(total, page, page_size),
    }


def error_response(status: int, message: str):
    """ A JSON error response, for Flask views

        Example:

            return error_response(400, 'Invalid page parameter')
    """
    return jsonify(error=message), status
