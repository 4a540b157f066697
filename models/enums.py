import enum


class Role(str, enum.Enum):
    WORKER = "worker"
    MANAGER = "manager"


class ContentCategory(str, enum.Enum):
    """Category shared by quizzes and training materials."""
    SAFETY = "Safety"
    OPERATIONS = "Operations"
    EMERGENCY = "Emergency"
    OTHER = "Other"


class ContentType(str, enum.Enum):
    DOCUMENT = "document"
    IMAGE = "image"
    VIDEO = "video"


class IncidentCategory(str, enum.Enum):
    SAFETY = "Safety"
    EQUIPMENT = "Equipment"
    LOGISTICS = "Logistics"
    OTHER = "Other"


class IncidentSeverity(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class IncidentStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


class AnnouncementPriority(str, enum.Enum):
    NORMAL = "normal"
    IMPORTANT = "important"
    URGENT = "urgent"


class AssignmentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class Action(str, enum.Enum):
    """Gated actions. Read actions are open to every authenticated user."""
    CREATE_ANNOUNCEMENT = "createAnnouncement"
    EDIT_ANNOUNCEMENT = "editAnnouncement"
    DELETE_ANNOUNCEMENT = "deleteAnnouncement"
    CREATE_QUIZ = "createQuiz"
    EDIT_QUIZ = "editQuiz"
    DELETE_QUIZ = "deleteQuiz"
    REPORT_INCIDENT = "reportIncident"
    CHANGE_INCIDENT_STATUS = "changeIncidentStatus"
    COMMENT_ON_INCIDENT = "commentOnIncident"
    VIEW_ALL_INCIDENTS = "viewAllIncidents"
    VIEW_OWN_INCIDENTS_ONLY = "viewOwnIncidentsOnly"
    ARCHIVE_INCIDENT = "archiveIncident"
    UPLOAD_TRAINING_MATERIAL = "uploadTrainingMaterial"
    DELETE_TRAINING_MATERIAL = "deleteTrainingMaterial"
    VIEW_TEAM_PROGRESS = "viewTeamProgress"
