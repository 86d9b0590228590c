"""Main Flask WSGI application hosting the voucher service."""

import os

from views import create_app

app, relevance_filter, validation_lookup = create_app(testing=False)

if __name__ == '__main__':
    app.run(port=int(os.environ.get('PORT', '7000')))
