from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# Initialize extensions without app context initially
# They will be initialized with the app in the factory function (create_app)
db = SQLAlchemy()
migrate = Migrate()

# Staff sessions for the write endpoints
login_manager = LoginManager()
