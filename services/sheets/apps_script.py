"""
Apps Script source for the backing spreadsheet.

Operators paste this into Extensions > Apps Script, deploy it as a web app
with access set to "Anyone", and configure the deployment URL as the
endpoint. doGet returns an empty array for an empty sheet so a cleared
spreadsheet reads as zero votes rather than an error.
"""

APPS_SCRIPT_SOURCE = """function doPost(e) {
  var sheet = SpreadsheetApp.getActiveSpreadsheet().getActiveSheet();
  var data = JSON.parse(e.postData.contents);
  sheet.appendRow([data.id, data.candidateId, data.region, new Date(data.timestamp)]);
  return ContentService.createTextOutput("Success");
}

function doGet(e) {
  var sheet = SpreadsheetApp.getActiveSpreadsheet().getActiveSheet();

  if (sheet.getLastRow() === 0) {
    return ContentService.createTextOutput("[]")
      .setMimeType(ContentService.MimeType.JSON);
  }

  var rows = sheet.getDataRange().getValues();
  var votes = [];

  for (var i = 0; i < rows.length; i++) {
    var row = rows[i];
    if (row[0] && row[1]) {
      votes.push({
        id: row[0],
        candidateId: row[1],
        region: row[2],
        timestamp: new Date(row[3]).getTime()
      });
    }
  }

  return ContentService.createTextOutput(JSON.stringify(votes))
    .setMimeType(ContentService.MimeType.JSON);
}
"""

DEPLOY_STEPS = (
    "In the spreadsheet open Extensions > Apps Script.",
    "Replace the project code with the script above.",
    "Deploy > New deployment, type Web app.",
    "Set 'Who has access' to Anyone.",
    "Deploy, copy the web app URL and configure it as the endpoint.",
)
