"""

The API user controls the list of results with a handful of query string parameters:

```
GET /api/user?page=2&pageSize=50&sortBy=name,created_at&sortOrder=asc,desc&search=john&searchColumns=name,email&preload=role&status=active
```

Query String Syntax
-------------------

* `page`, `pageSize`: [Pagination](#pagination)
* `sortBy`, `sortOrder`: [Sorting](#sorting)
* `search`, `searchColumns`: [Search](#search)
* `preload`: [Preload](#preload) loads related models
* `includeArchived`: [Archive](#archive) switches to soft-deleted rows
* Any other parameter: [Filters](#filters), exact match

Nothing here ever fails because of bad input: nonsense values fall back to defaults,
and column names that are not whitelisted are quietly dropped.
"""

from .base import QueryOptionsHandlerBase
from .limit import PaginationHandler
from .sort import SortHandler
from .filter import FilterHandler
from .search import SearchHandler
from .preload import PreloadHandler
from .archive import ArchiveHandler
