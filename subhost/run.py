from subhost.app import app

# imports so the decorators run :(
import subhost.views  # noreorder # noqa


def debug():  # pragma: no cover
    app.run(debug=True)


if __name__ == '__main__':
    exit(debug())
